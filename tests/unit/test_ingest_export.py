"""Unit tests for transcript extraction and Word export."""

import io

import docx
import openpyxl
import pytest
from docgen.estimate import compile_estimate
from docgen.export import clean_inline, ledger_to_xlsx, markdown_to_docx, parse_markdown
from docgen.ingest import FileKind, extract_file, extract_text
from docgen.ingest import extractors


def _docx_bytes(*paragraphs):
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestFileKind:
    """Tests for FileKind."""

    @pytest.mark.parametrize("filename,kind", [
        ("notes.txt", FileKind.TEXT),
        ("notes.MD", FileKind.TEXT),
        ("meeting.pdf", FileKind.PDF),
        ("meeting.docx", FileKind.DOCX),
    ])
    def test_from_filename(self, filename, kind):
        assert FileKind.from_filename(filename) is kind

    @pytest.mark.parametrize("filename", ["slides.pptx", "audio.mp3", "README"])
    def test_unsupported(self, filename):
        with pytest.raises(ValueError):
            FileKind.from_filename(filename)


class TestExtractText:
    """Tests for extract_text."""

    def test_plain_text(self):
        assert extract_text("Réunion client".encode("utf-8"), "notes.txt") == "Réunion client"

    def test_docx(self):
        data = _docx_bytes("Client: bonjour", "PM: bonjour")
        assert extract_text(data, FileKind.DOCX) == "Client: bonjour\nPM: bonjour"

    def test_pdf_pages_joined(self, monkeypatch):
        class FakePage:
            def __init__(self, text):
                self.text = text

            def extract_text(self):
                return self.text

        class FakeReader:
            def __init__(self, stream):
                self.pages = [FakePage("Page un"), FakePage(None), FakePage("Page trois")]

        monkeypatch.setattr(extractors.PyPDF2, "PdfReader", FakeReader)
        assert extract_text(b"%PDF-1.4", "meeting.pdf") == "Page un\n\nPage trois"

    def test_unsupported(self):
        with pytest.raises(ValueError):
            extract_text(b"data", "slides.pptx")

    def test_extract_file(self, tmp_path):
        path = tmp_path / "meeting.docx"
        path.write_bytes(_docx_bytes("Transcription"))
        assert extract_file(path) == "Transcription"


class TestParseMarkdown:
    """Tests for markdown line classification."""

    def test_kinds(self):
        lines = parse_markdown(
            "# Titre\n## Section\n### Sous-section\n- item\n  - nested\n1. first\n\nTexte\n"
            "```mermaid\nflowchart TD\n```"
        )
        assert [(l.kind, l.content, l.level) for l in lines] == [
            ("h1", "Titre", 0),
            ("h2", "Section", 0),
            ("h3", "Sous-section", 0),
            ("list", "item", 0),
            ("list", "nested", 1),
            ("list", "first", 0),
            ("paragraph", "Texte", 0),
            ("code", "flowchart TD", 0),
        ]

    def test_clean_inline(self):
        assert clean_inline("**En tant que** *client*, voir `code` et [lien](http://x)") == (
            "En tant que client, voir code et lien"
        )

    def test_checkboxes(self):
        assert clean_inline("[ ] Critère") == "• Critère"
        assert clean_inline("[x] Fait") == "• Fait"


class TestMarkdownToDocx:
    """Tests for markdown_to_docx."""

    def test_renders_document(self):
        data = markdown_to_docx(
            "# US-1: Connexion\n\n**En tant que** client\n\n- [ ] Email valide\n\n```\ncode\n```",
            "User Stories",
        )
        document = docx.Document(io.BytesIO(data))
        texts = [p.text for p in document.paragraphs]

        assert texts[0] == "User Stories"
        assert "US-1: Connexion" in texts
        assert "En tant que client" in texts
        assert "• Email valide" in texts
        assert "code" in texts

    def test_heading_styles(self):
        document = docx.Document(io.BytesIO(markdown_to_docx("## Section\n- point", "Titre")))
        styles = {p.text: p.style.name for p in document.paragraphs}
        assert styles["Section"] == "Heading 2"
        assert styles["point"] == "List Bullet"


class TestLedgerToXlsx:
    """Tests for ledger_to_xlsx."""

    @pytest.fixture
    def workbook(self):
        ledger = compile_estimate({
            "sections": [
                {"name": "Authentification", "features": [
                    {"name": "Inscription", "role": "Visiteur", "days": 2, "complexity": 1.5},
                    {"name": "Connexion", "role": "Utilisateur", "days": 1, "complexity": 1},
                ]},
                {"name": "Paiement", "features": [
                    {"name": "Stripe", "role": "Client", "days": 3, "complexity": 2, "comment": "3D Secure"},
                ]},
            ],
            "roles": [{"name": "Client", "description": "Utilisateur payant"}],
        }, 500)
        return openpyxl.load_workbook(io.BytesIO(ledger_to_xlsx(ledger)))

    def test_sheets(self, workbook):
        assert workbook.sheetnames == ["Fonctionnalités", "Rôles utilisateurs", "Récapitulatif"]

    def test_features_sheet(self, workbook):
        ws = workbook["Fonctionnalités"]
        rows = [row for row in ws.iter_rows(values_only=True)]

        assert rows[0][:4] == ("Section", "Fonctionnalité", "Rôle", "Jours estimés")
        assert ws.freeze_panes == "A2"
        assert ws.auto_filter.ref == "A1:H1"
        assert rows[3][1] == "Sous-total Authentification"
        assert rows[3][5] == pytest.approx(4)
        assert rows[4][7] == "3D Secure"

        total = rows[-1]
        assert total[1] == "TOTAL GÉNÉRAL"
        assert total[5] == pytest.approx(10)
        assert total[6] == pytest.approx(5000)

    def test_roles_sheet(self, workbook):
        rows = list(workbook["Rôles utilisateurs"].iter_rows(values_only=True))
        assert rows == [("Rôle", "Description"), ("Client", "Utilisateur payant")]

    def test_summary_sheet(self, workbook):
        ws = workbook["Récapitulatif"]
        values = {row[0]: row[1:] for row in ws.iter_rows(values_only=True) if row[0]}

        assert ws["A1"].value == "RÉCAPITULATIF DU CHIFFRAGE"
        assert values["TJM (€/jour)"][0] == 500
        assert values["Total HT"][1] == pytest.approx(5000)
        assert values["GDP (20%)"][1] == pytest.approx(1000)
        assert values["TOTAL TTC"][1] == pytest.approx(7200)
        assert values["Nombre de fonctionnalités"][0] == 3
