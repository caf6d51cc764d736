"""
Sample weekly timetable served when no material for the requested week
carries one. Deployments can replace it through TIMETABLE_FALLBACK_FILE.
"""

import json
import logging

logger = logging.getLogger(__name__)

def _day(*periods):
    return {
        str(i): {"subject": subject, "unit": unit, "topic": topic}
        for i, (subject, unit, topic) in enumerate(periods, start=1)
    }

DEFAULT_TIMETABLE = {
    "월": _day(
        ("국어", "문학", "작품을 읽고 느낌 나타내기"),
        ("수학", "분수", "분수의 덧셈과 뺄셈"),
        ("과학", "생태계", "생태계 구성 요소 알아보기"),
        ("사회", "삼국통일", "신라의 삼국통일 과정"),
        ("체육", "체력운동", "기초체력 기르기"),
        ("음악", "노래부르기", "계이름으로 부르기"),
    ),
    "화": _day(
        ("수학", "분수", "분수의 크기 비교하기"),
        ("국어", "대화", "상황에 맞는 대화하기"),
        ("영어", "My School", "학교 장소 이름 익히기"),
        ("미술", "표현", "상상화 그리기"),
        ("과학", "생태계", "먹이 관계 알아보기"),
        ("도덕", "정직", "정직한 생활 실천하기"),
    ),
    "수": _day(
        ("사회", "삼국과 가야", "고구려, 백제, 신라의 문화"),
        ("수학", "분수", "분수의 곱셈"),
        ("국어", "토의하기", "의견을 나누며 토의하기"),
        ("실과", "간단한 음식", "샐러드 만들기"),
        ("체육", "경쟁활동", "피구게임하기"),
        ("창체", "동아리", "독서 동아리 활동"),
    ),
    "목": _day(
        ("국어", "글쓰기", "경험을 글로 써보기"),
        ("과학", "생태계", "생태계 보전 방법"),
        ("수학", "분수", "분수의 나눗셈"),
        ("영어", "My School", "학교생활 표현하기"),
        ("사회", "문화재", "우리나라 문화재 알아보기"),
        ("음악", "감상", "클래식 음악 감상하기"),
    ),
    "금": _day(
        ("수학", "소수", "소수의 의미 알기"),
        ("국어", "읽기", "글의 중심내용 파악하기"),
        ("과학", "물질의 성질", "물질의 특성 관찰하기"),
        ("미술", "만들기", "찰흙으로 작품 만들기"),
        ("도덕", "배려", "다른 사람을 배려하는 마음"),
        ("창체", "자율", "학급회의 하기"),
    ),
    "토": _day(
        ("국어", "독서", "다양한 책 읽기"),
        ("수학", "소수", "소수의 덧셈과 뺄셈"),
        ("실과", "생활용품", "생활용품 만들기"),
        ("체육", "표현활동", "리듬체조 배우기"),
    ),
}

def load_fallback_timetable(path: str = None) -> dict:
    if not path:
        return DEFAULT_TIMETABLE
    with open(path, encoding="utf-8") as f:
        timetable = json.load(f)
    logger.info(f"Loaded fallback timetable from {path}")
    return timetable
