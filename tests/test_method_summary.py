"""Tests for declaration extraction and method stack summaries."""

from _engine.prompt.java_extractor import extract_java
from _engine.prompt.method_summary import build_method_summary, edited_lines, split_lines
from _engine.prompt.python_extractor import extract_python
from _types.model import Change

JAVA_SOURCE = """package demo;

public class Calculator {
    public Calculator() {
        reset();
    }

    public int add(int a, int b) {
        log("add");
        return a + b;
    }

    private void log(String message) {
        System.out.println(message);
    }

    private void reset() {
    }
}
"""

PYTHON_SOURCE = '''class Greeter:
    def greet(self, name: str) -> str:
        return self.format(name)

    def format(self, name):
        return helper(name)


def helper(value):
    return value.strip()


def format(value):
    return value
'''


def test_split_lines_drops_trailing_empty_segments() -> None:
    assert split_lines("") == []
    assert split_lines("a\nb\n\n") == ["a", "b"]
    assert split_lines("a\n\nb") == ["a", "", "b"]


def test_java_declarations_and_calls() -> None:
    graph = extract_java(JAVA_SOURCE)

    signatures = [d.signature for d in graph.declarations]
    assert signatures == [
        "Calculator.Calculator()",
        "int Calculator.add(int a, int b)",
        "void Calculator.log(String message)",
        "void Calculator.reset()",
    ]
    assert [d.signature for d in graph.callees(0)] == ["void Calculator.reset()"]
    assert [d.signature for d in graph.callees(1)] == ["void Calculator.log(String message)"]
    assert graph.callees(2) == []
    assert graph.callees(3) == []


def test_java_overloads_resolved_by_argument_count() -> None:
    source = """class Overloads {
    void f(int a) {}
    void f(int a, int b) {}
    void g() { f(1); new Overloads(); }
}
"""
    graph = extract_java(source)

    assert [d.signature for d in graph.callees(2)] == ["void Overloads.f(int a)"]


def test_java_declaration_lines() -> None:
    graph = extract_java(JAVA_SOURCE)

    add = graph.declarations[1]
    assert (add.start_line, add.end_line) == (8, 11)


def test_python_declarations_and_self_calls() -> None:
    graph = extract_python(PYTHON_SOURCE)

    signatures = [d.signature for d in graph.declarations]
    assert signatures == [
        "def Greeter.greet(self, name: str) -> str",
        "def Greeter.format(self, name)",
        "def helper(value)",
        "def format(value)",
    ]
    # self.format binds to the method, not the module function of the same name
    assert [d.signature for d in graph.callees(0)] == ["def Greeter.format(self, name)"]
    assert [d.signature for d in graph.callees(1)] == ["def helper(value)"]
    assert graph.callees(2) == []


def test_summary_lists_every_declaration_by_default() -> None:
    change = Change(path="Calculator.java", before=JAVA_SOURCE, after=JAVA_SOURCE)

    summary = build_method_summary(change, "/Calculator.java")

    assert summary == (
        "It's the method structure summary of file: /Calculator.java\n"
        " - Calculator.Calculator()\n"
        "    - void Calculator.reset()\n"
        " - int Calculator.add(int a, int b)\n"
        "    - void Calculator.log(String message)\n"
        " - void Calculator.log(String message)\n"
        " - void Calculator.reset()\n"
    )


def test_summary_only_edited_declarations() -> None:
    before = "def a():\n    return 1\n\ndef b():\n    return 2\n"
    after = "def a():\n    return 1\n\ndef b():\n    return 3\n"
    change = Change(path="m.py", before=before, after=after)

    summary = build_method_summary(change, "/m.py", only_edited=True)

    assert summary == "It's the method structure summary of file: /m.py\n - def b()\n"


def test_edited_lines_marks_deletion_neighbours() -> None:
    assert edited_lines("a\nb\nc\n", "a\nc\n") == {1, 2}
    assert edited_lines("", "x\ny\n") == {1, 2}


def test_summary_skipped_for_unparseable_source() -> None:
    change = Change(path="broken.py", after="def (:\n")

    assert build_method_summary(change, "/broken.py") is None


def test_summary_skipped_for_unknown_suffix() -> None:
    change = Change(path="style.css", after="body {}\n")

    assert build_method_summary(change, "/style.css") is None


def test_deleted_file_summary_has_no_declarations() -> None:
    change = Change(path="Old.java", before=JAVA_SOURCE, after=None, status="D")

    assert build_method_summary(change, "/Old.java") == "It's the method structure summary of file: /Old.java\n"


def test_summary_skipped_when_extractor_fails() -> None:
    def unavailable(source: str):
        raise RuntimeError("parser unavailable")

    change = Change(path="A.java", after="class A {}\n", status="A")

    assert build_method_summary(change, "/A.java", extractors={".java": unavailable}) is None
