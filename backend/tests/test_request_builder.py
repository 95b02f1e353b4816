from app.models.schemas import FileCategory
from app.services.file_intake import UploadedFile
from app.services.request_builder import FilePart, build


def _file(file_id, category, filename=None, content_type="application/pdf", encoded="JVBERg=="):
    return UploadedFile(
        id=file_id,
        filename=filename or f"{file_id}.pdf",
        content_type=content_type,
        category=category,
        raw=b"%PDF",
        encoded=encoded,
    )


def test_parts_keep_working_set_order_with_instruction_last():
    files = [
        _file("s1", FileCategory.SYLLABUS),
        _file("p1", FileCategory.PAST_PAPER, content_type="image/png", encoded="iVBORw=="),
        _file("p2", FileCategory.PAST_PAPER),
    ]

    request = build(files)

    assert [p.filename for p in request.file_parts] == ["s1.pdf", "p1.pdf", "p2.pdf"]
    assert request.file_parts[1] == FilePart(mime_type="image/png", data="iVBORw==", filename="p1.pdf")
    assert request.parts[-1] == request.instruction
    assert len(request.parts) == 4


def test_instruction_is_deterministic_for_same_counts():
    a = [_file("s1", FileCategory.SYLLABUS), _file("p1", FileCategory.PAST_PAPER)]
    b = [_file("x", FileCategory.PAST_PAPER, filename="other.pdf"), _file("y", FileCategory.SYLLABUS)]

    assert build(a).instruction == build(a).instruction
    assert build(a).instruction == build(b).instruction


def test_instruction_embeds_category_counts():
    files = [
        _file("s1", FileCategory.SYLLABUS),
        _file("p1", FileCategory.PAST_PAPER),
        _file("p2", FileCategory.PAST_PAPER),
        _file("p3", FileCategory.PAST_PAPER),
    ]
    request = build(files)

    assert "Syllabus (1 file(s))" in request.instruction
    assert "Papers (3 file(s))" in request.instruction
    assert "Reference Books/Notes" not in request.instruction
    assert request.counts[FileCategory.PAST_PAPER] == 3

    with_reference = build(files + [_file("r1", FileCategory.REFERENCE)])
    assert "Reference Books/Notes (1 file(s))" in with_reference.instruction


def test_instruction_lists_the_result_schema():
    instruction = build([_file("s1", FileCategory.SYLLABUS)]).instruction

    for field in [
        "overview", "weightage", "deepDive", "twists", "samplePaper", "strategy",
        "conceptName", "occurrences", "questionSnippet", "easyTrick",
        "examinerPsychology", "currentYearPrediction", "qNo", "difficulty",
    ]:
        assert f'"{field}"' in instruction
    assert '"rising"|"falling"|"stable"' in instruction
    assert '"High"|"Medium"|"Low"' in instruction
    assert '"Easy"|"Medium"|"Hard"' in instruction


def test_files_without_payload_are_skipped():
    request = build([_file("s1", FileCategory.SYLLABUS, encoded=None)])
    assert request.file_parts == ()
    assert request.counts[FileCategory.SYLLABUS] == 1
