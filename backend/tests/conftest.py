import pytest
from reportlab.pdfgen import canvas

from backend.tests.mocks import MockCompletions, MockOpenAIClient


@pytest.fixture(scope="session")
def sample_pdf(tmp_path_factory):
    path = tmp_path_factory.mktemp("data") / "syllabus.pdf"
    c = canvas.Canvas(str(path))
    c.drawString(100, 800, "SYLLABUS Physics Paper I")
    c.drawString(100, 780, "UNIT 1 Kinematics")
    c.drawString(100, 760, "UNIT 2 Optics")
    c.save()
    return path


@pytest.fixture(autouse=True)
def mock_llm(monkeypatch):
    completions = MockCompletions()
    monkeypatch.setattr(
        "app.utils.llm_client._get_client", lambda: MockOpenAIClient(completions)
    )
    return completions
