from typing import List

class BulkParseError(ValueError):
    def __init__(self, line_no: int, line: str):
        super().__init__(f"잘못된 형식 ({line_no}번째 줄): {line}")
        self.line_no = line_no
        self.line = line

def parse_student_lines(text: str) -> List[dict]:
    """
    Parses "name,studentNumber,username,password" lines. Blank lines are
    skipped; any other line must have exactly four non-empty fields or the
    whole batch is rejected.
    """
    rows = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        fields = [f.strip() for f in line.split(",")]
        if len(fields) != 4 or not all(fields):
            raise BulkParseError(line_no, line.strip())
        name, student_number, username, password = fields
        rows.append({
            "name": name,
            "student_number": student_number,
            "username": username,
            "password": password,
        })
    return rows
