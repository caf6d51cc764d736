from typing import List

DEFAULT_SUBJECTS = ["국어", "수학", "과학", "사회"]

def build_evaluation_prompt(student_name: str, subject: str, records: List[dict]) -> str:
    records_text = "\n".join(
        f"{r['week']}주차: {r['content']} | 소감: {r.get('reflection') or ''}"
        for r in records
    )

    return f"""
당신은 초등학교 교사로서 학생들의 학습 기록을 바탕으로 생활기록부 평어를 작성하는 전문가입니다.

다음은 초등학교 5학년 학생 "{student_name}"의 "{subject}" 과목 주간 학습 기록입니다.

학습 기록:
{records_text}

위 학습 기록을 바탕으로 다음 조건에 맞는 평어를 작성해주세요:
1. 최대 2개 문장으로 구성
2. 학생의 구체적인 학습 내용과 성장 모습을 반영
3. 초등학교 생활기록부에 적합한 격식 있는 문체
4. 학생의 긍정적인 면과 발전 가능성을 강조
5. 한국어로 작성

JSON 형식으로만 응답해주세요: {{ "evaluation": "평어 내용" }}
"""

def build_subject_prompt(content: str) -> str:
    return f"""
당신은 교육 문서 분석 전문가입니다. 주어진 문서에서 교과목을 정확히 추출해주세요.

다음은 초등학교 주간학습 안내 문서의 내용입니다:

{content}

이 문서에서 언급된 교과목들을 추출해주세요.
일반적인 초등학교 교과목: 국어, 수학, 과학, 사회, 도덕, 실과, 체육, 음악, 미술, 영어

JSON 형식으로만 응답해주세요: {{ "subjects": ["과목1", "과목2", ...] }}
"""
