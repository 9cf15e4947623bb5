from __future__ import annotations

from legacylens.analysis.models import SourceFile
from legacylens.analysis.prompt import SYSTEM_PROMPT, TRUNCATION_MARKER, build_messages, compact
from tests.helpers import SAMPLE_FILES

#############################
#     Tests for compact     #
#############################


def test_compact_short_text() -> None:
    assert compact("abc", 10) == "abc"


def test_compact_exact_length() -> None:
    assert compact("abc", 3) == "abc"


def test_compact_truncates() -> None:
    assert compact("abcdef", 4) == "abcd" + TRUNCATION_MARKER


def test_compact_empty() -> None:
    assert compact("", 5) == ""


####################################
#     Tests for build_messages     #
####################################


def test_build_messages_roles() -> None:
    messages = build_messages(SAMPLE_FILES)
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PROMPT


def test_build_messages_system_prompt_lists_keys() -> None:
    for key in ("tables", "erd_mermaid", "crud_matrix", "processes", "doc_links"):
        assert key in SYSTEM_PROMPT


def test_build_messages_sections() -> None:
    user = build_messages(SAMPLE_FILES)[1]["content"]
    assert user == (
        "[CODE+SCHEMA START]\n"
        "// OrderService.cs\n"
        "public class OrderService { void Create() { db.Orders.Add(o); } }\n\n"
        "// schema.sql\n"
        "CREATE TABLE Orders (OrderId INT PRIMARY KEY, UserId INT);\n"
        "[CODE+SCHEMA END]\n\n"
        "[DOCUMENTS START]\n"
        "# README.md\n"
        "Orders are created by the order service.\n"
        "[DOCUMENTS END]\n\n"
        "Return only JSON. No markdown fences."
    )


def test_build_messages_no_documents() -> None:
    files = [SourceFile(name="a.cs", type="cs", content="x")]
    user = build_messages(files)[1]["content"]
    assert "[DOCUMENTS START]\n\n[DOCUMENTS END]" in user


def test_build_messages_truncates_each_section() -> None:
    files = [
        SourceFile(name="a.cs", type="cs", content="c" * 50),
        SourceFile(name="b.txt", type="doc", content="d" * 50),
    ]
    user = build_messages(files, max_chars=20)[1]["content"]
    code = ("// a.cs\n" + "c" * 50)[:20] + TRUNCATION_MARKER
    docs = ("# b.txt\n" + "d" * 50)[:20] + TRUNCATION_MARKER
    assert f"[CODE+SCHEMA START]\n{code}\n[CODE+SCHEMA END]" in user
    assert f"[DOCUMENTS START]\n{docs}\n[DOCUMENTS END]" in user


def test_build_messages_accepts_iterator() -> None:
    messages = build_messages(iter(SAMPLE_FILES))
    assert "// schema.sql" in messages[1]["content"]
    assert "# README.md" in messages[1]["content"]
