# tests/test_core.py
import os
import pytest
from pathlib import Path

from codecopy.config import UNKNOWN_LANGUAGE
from codecopy.core.assembler import assemble
from codecopy.core.budget import BudgetState, budget_state, enforce_budget, largest_first
from codecopy.core.detector import detect_project_type
from codecopy.core.ignore import is_path_ignored, load_ignore_spec
from codecopy.core.presenter import show_selected_files
from codecopy.core.scanner import ProjectScanner
from codecopy.core.selector import select_files
from codecopy.core.sink import deliver
from codecopy.core.tree import extract_files_from_tree, generate_project_tree, render_tree
from codecopy.exceptions import DeliveryError, TokenizationError, TraversalError
from codecopy.models import DeliveryOutcome, FileEntry, RunOptions
from codecopy.utils.tokenizer import Tokenizer

def words(text):
    return len(text.split())

def write_words(path: Path, count: int):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(" ".join(["tok"] * count), encoding="utf-8")

def scanner_for(root: Path) -> ProjectScanner:
    return ProjectScanner(root, load_ignore_spec(root))

# --- Fixtures ---

@pytest.fixture
def go_project(tmp_path):
    """main.go (500 tokens) and README.md (100 tokens)."""
    write_words(tmp_path / "main.go", 500)
    write_words(tmp_path / "README.md", 100)
    return tmp_path

@pytest.fixture
def mixed_project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("print('app')", encoding="utf-8")
    (tmp_path / "src" / "util.py").write_text("def util(): pass", encoding="utf-8")
    (tmp_path / "tool.go").write_text("package main", encoding="utf-8")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "a.js").write_text("x", encoding="utf-8")
    (tmp_path / "node_modules" / "lib" / "b.js").write_text("y", encoding="utf-8")
    (tmp_path / "node_modules" / "lib" / "c.js").write_text("z", encoding="utf-8")
    return tmp_path

# --- Ignore rules ---

def test_builtin_ignore_list_matches_directories_at_any_depth(tmp_path):
    spec = load_ignore_spec(tmp_path)
    assert is_path_ignored("node_modules", spec, is_directory=True) is True
    assert is_path_ignored("web/node_modules", spec, is_directory=True) is True
    assert is_path_ignored(Path("pkg/__pycache__/mod.pyc"), spec) is True
    assert is_path_ignored("src/builder.py", spec) is False
    assert is_path_ignored("code_context.txt", spec) is True

def test_codecopyignore_adds_rules(tmp_path):
    (tmp_path / ".codecopyignore").write_text("*.lock\n!keep.lock\n", encoding="utf-8")
    spec = load_ignore_spec(tmp_path)
    assert is_path_ignored("Cargo.lock", spec) is True
    assert is_path_ignored("keep.lock", spec) is False

def test_scanner_walk_is_sorted_and_pruned(mixed_project):
    scanner = scanner_for(mixed_project)
    paths = [e.rel_path for e in scanner.walk()]
    assert paths == ["tool.go", "src/app.py", "src/util.py"]
    assert scanner.excluded() == ["node_modules/lib/a.js", "node_modules/lib/b.js", "node_modules/lib/c.js"]

def test_scanner_missing_root_is_fatal(tmp_path):
    scanner = scanner_for(tmp_path / "missing")
    with pytest.raises(TraversalError):
        list(scanner.walk())

# --- Extension classifier ---

def test_detect_go_project(go_project):
    assert detect_project_type(go_project) == "Go"

def test_detect_counts_files_in_ignored_directories(mixed_project):
    assert detect_project_type(mixed_project) == "JavaScript/TypeScript"

def test_detect_counts_vendored_sources(tmp_path):
    for i in range(3):
        write_words(tmp_path / "vendor" / f"d{i}.go", 1)
    write_words(tmp_path / "a.py", 1)
    assert detect_project_type(tmp_path) == "Go"

def test_detect_missing_root_is_fatal(tmp_path):
    with pytest.raises(TraversalError):
        detect_project_type(tmp_path / "missing")

def test_detect_sums_js_and_ts(tmp_path):
    for name in ("a.js", "b.ts", "c.py"):
        (tmp_path / name).write_text("1", encoding="utf-8")
    assert detect_project_type(tmp_path) == "JavaScript/TypeScript"

def test_detect_tie_keeps_first_to_reach_maximum(tmp_path):
    (tmp_path / "a.rs").write_text("1", encoding="utf-8")
    (tmp_path / "b.php").write_text("1", encoding="utf-8")
    assert detect_project_type(tmp_path) == "Rust"

def test_detect_unknown(tmp_path):
    (tmp_path / "notes.md").write_text("hi", encoding="utf-8")
    assert detect_project_type(tmp_path) == UNKNOWN_LANGUAGE

# --- File selector ---

def test_select_uses_detected_language(go_project):
    selected = select_files(scanner_for(go_project), "Go", RunOptions())
    assert [e.rel_path for e in selected] == ["README.md", "main.go"]

def test_forced_language_overrides_detection(go_project):
    selected = select_files(scanner_for(go_project), "Go", RunOptions(language="Python"))
    assert [e.rel_path for e in selected] == ["README.md"]

def test_unknown_language_falls_back_to_tree(tmp_path):
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.rst").write_text("guide", encoding="utf-8")
    (tmp_path / "Makefile").write_text("all:", encoding="utf-8")
    selected = select_files(scanner_for(tmp_path), UNKNOWN_LANGUAGE, RunOptions())
    assert [e.rel_path for e in selected] == ["Makefile", "docs/guide.rst"]
    assert selected[1].extension == ".rst"

def test_manual_selection_keeps_pick_order(mixed_project):
    offered = []

    def fake_prompt(label, items):
        offered.extend(items)
        return ["src/util.py", "tool.go"]

    selected = select_files(scanner_for(mixed_project), "Python", RunOptions(manual=True), prompt=fake_prompt)
    assert offered == ["tool.go", "src/app.py", "src/util.py"]
    assert [e.rel_path for e in selected] == ["src/util.py", "tool.go"]

def test_manual_selection_through_input(mixed_project, monkeypatch):
    answers = iter(["3", "1", ""])
    monkeypatch.setattr("builtins.input", lambda _: next(answers))
    selected = select_files(scanner_for(mixed_project), "Python", RunOptions(manual=True))
    assert [e.rel_path for e in selected] == ["src/util.py", "tool.go"]

def test_manual_selection_interrupt_keeps_picks(mixed_project, monkeypatch):
    answers = iter(["2"])

    def fake_input(_):
        try:
            return next(answers)
        except StopIteration:
            raise KeyboardInterrupt

    monkeypatch.setattr("builtins.input", fake_input)
    selected = select_files(scanner_for(mixed_project), "Python", RunOptions(manual=True))
    assert [e.rel_path for e in selected] == ["src/app.py"]

def test_empty_directory_selects_nothing(tmp_path):
    assert select_files(scanner_for(tmp_path), UNKNOWN_LANGUAGE, RunOptions()) == []

# --- Tree ---

def test_tree_generation_with_counts():
    tree_str = generate_project_tree(
        ["src/main.py", "src/utils/helper.py", "README.md"],
        root_name="my_project",
        token_counts={"src/main.py": 7, "src/utils/helper.py": 3, "README.md": 2},
    )
    assert tree_str.startswith("my_project/\n")
    assert "└── src/" in tree_str
    assert "main.py" in tree_str and "| 7" in tree_str
    assert tree_str.rstrip().endswith("| 12")
    assert "2 directories, 3 files" in tree_str

def test_rendered_tree_round_trips_leaf_files(mixed_project):
    (mixed_project / "src" / "nested").mkdir()
    (mixed_project / "src" / "nested" / "deep.py").write_text("", encoding="utf-8")
    (mixed_project / "empty").mkdir()

    tree_output = render_tree(mixed_project, load_ignore_spec(mixed_project))
    assert "node_modules" not in tree_output
    assert "├── empty/" in tree_output
    assert extract_files_from_tree(tree_output) == [
        "src/app.py", "src/nested/deep.py", "src/util.py", "tool.go",
    ]

def test_tree_fallback_does_not_follow_directory_symlinks(tmp_path):
    (tmp_path / "d").mkdir()
    (tmp_path / "d" / "notes.rst").write_text("notes", encoding="utf-8")
    try:
        os.symlink(tmp_path / "d", tmp_path / "d" / "loop", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")

    tree_output = render_tree(tmp_path, load_ignore_spec(tmp_path))
    assert "loop/" in tree_output
    assert tree_output.count("loop") == 1

    selected = select_files(scanner_for(tmp_path), UNKNOWN_LANGUAGE, RunOptions())
    assert [e.rel_path for e in selected] == ["d/notes.rst"]

# --- Assembler ---

def test_assemble_totals_match_tally(go_project):
    files = list(scanner_for(go_project).walk())
    document = assemble(go_project, files, count_tokens=words)

    assert document.total_tokens == 600
    assert document.tally == {"README.md": 100, "main.go": 500}
    assert document.text.startswith(f"Root Directory: {go_project}\n\nTotal Tokens: 600\n\nTree:\n")
    assert "\nREADME.md\n\n" in document.text
    assert "\nmain.go\n\n" in document.text
    assert document.text.index("\nREADME.md\n\n") < document.text.index("\nmain.go\n\n")

def test_assemble_is_deterministic(go_project):
    files = list(scanner_for(go_project).walk())
    assert assemble(go_project, files, words).text == assemble(go_project, files, words).text

def test_assemble_skips_unreadable_and_binary(tmp_path, capsys):
    (tmp_path / "ok.py").write_text("a b c", encoding="utf-8")
    (tmp_path / "blob.pyc").write_bytes(b"\x00\x01\x02")
    files = [
        FileEntry.from_path(tmp_path / "ok.py", tmp_path),
        FileEntry.from_path(tmp_path / "blob.pyc", tmp_path),
        FileEntry.from_path(tmp_path / "gone.py", tmp_path),
    ]
    document = assemble(tmp_path, files, count_tokens=words)

    assert document.tally == {"ok.py": 3}
    assert document.total_tokens == 3
    assert [e.rel_path for e in document.files] == ["ok.py"]
    assert "blob.pyc" not in document.text
    assert "gone.py" not in document.text
    assert "Skipping blob.pyc" in capsys.readouterr().err

def test_assemble_skips_tokenizer_failures(tmp_path):
    (tmp_path / "a.py").write_text("fine", encoding="utf-8")
    (tmp_path / "b.py").write_text("boom", encoding="utf-8")

    def picky(text):
        if text == "boom":
            raise TokenizationError("cannot encode")
        return 1

    files = [FileEntry.from_path(tmp_path / n, tmp_path) for n in ("a.py", "b.py")]
    document = assemble(tmp_path, files, count_tokens=picky)
    assert document.tally == {"a.py": 1}
    assert "\nb.py\n" not in document.text

def test_assemble_empty_selection(tmp_path):
    document = assemble(tmp_path, [], count_tokens=words)
    assert document.total_tokens == 0
    assert document.text.endswith("Code Context:\n")

# --- Budget enforcer ---

@pytest.fixture
def big_project(tmp_path):
    write_words(tmp_path / "a.py", 3000)
    write_words(tmp_path / "b.py", 5000)
    write_words(tmp_path / "c.py", 4000)
    return tmp_path

def test_budget_state():
    assert budget_state(10_000, 10_000) is BudgetState.WITHIN_BUDGET
    assert budget_state(10_001, 10_000) is BudgetState.OVER_BUDGET

def test_within_budget_is_untouched(go_project):
    files = list(scanner_for(go_project).walk())
    document = assemble(go_project, files, words)

    def never(*_):
        raise AssertionError("should not be called")

    kept, result = enforce_budget(go_project, files, document, 10_000, never, never)
    assert result is document
    assert kept == files

def test_over_budget_runs_one_remediation_round(big_project):
    files = list(scanner_for(big_project).walk())
    document = assemble(big_project, files, words)
    assert document.total_tokens == 12_000

    calls = []

    def reassemble(root, remaining):
        calls.append([e.rel_path for e in remaining])
        return assemble(root, remaining, words)

    kept, result = enforce_budget(big_project, files, document, 10_000, lambda f, d: ["a.py"], reassemble)

    assert calls == [["b.py", "c.py"]]
    assert result.total_tokens == 9_000
    assert "\na.py\n" not in result.text
    assert "a.py" not in result.text.split("Code Context:")[0]

def test_still_over_budget_is_not_rechecked(big_project, capsys):
    files = list(scanner_for(big_project).walk())
    document = assemble(big_project, files, words)
    calls = []

    def reassemble(root, remaining):
        calls.append(remaining)
        return assemble(root, remaining, words)

    _, result = enforce_budget(big_project, files, document, 10_000, lambda f, d: [], reassemble)
    assert len(calls) == 1
    assert result.total_tokens == 12_000
    assert "Still over budget" in capsys.readouterr().err

def test_largest_first_drops_biggest_files(big_project):
    files = list(scanner_for(big_project).walk())
    document = assemble(big_project, files, words)
    assert largest_first(10_000)(files, document) == ["b.py"]
    assert largest_first(2_000)(files, document) == ["b.py", "c.py", "a.py"]

def test_largest_first_tie_drops_later_file(tmp_path):
    write_words(tmp_path / "a.py", 10)
    write_words(tmp_path / "b.py", 10)
    files = list(scanner_for(tmp_path).walk())
    document = assemble(tmp_path, files, words)
    assert largest_first(15)(files, document) == ["b.py"]

# --- Sink ---

def test_deliver_to_clipboard(monkeypatch, tmp_path):
    copied = []
    monkeypatch.setattr("codecopy.core.sink.pyperclip.copy", copied.append)
    outcome = deliver("context", fallback_path=tmp_path / "code_context.txt", platform="linux")
    assert outcome is DeliveryOutcome.CLIPBOARD
    assert copied == ["context"]
    assert not (tmp_path / "code_context.txt").exists()

def test_unsupported_platform_writes_fallback(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    outcome = deliver("Root Directory: x\n\nTotal Tokens: 0\n", platform="plan9")
    assert outcome is DeliveryOutcome.FALLBACK_FILE
    assert (tmp_path / "code_context.txt").read_text(encoding="utf-8") == "Root Directory: x\n\nTotal Tokens: 0\n"

def test_failed_fallback_write_is_fatal(tmp_path):
    with pytest.raises(DeliveryError):
        deliver("x", fallback_path=tmp_path / "missing" / "code_context.txt", platform="plan9")

# --- Tokenizer ---

class _BrokenEncoding:
    def encode(self, text, **kwargs):
        raise ValueError("bad input")

def test_tokenizer_encode_failure_raises(monkeypatch):
    monkeypatch.setattr(Tokenizer, "_encoding", _BrokenEncoding())
    with pytest.raises(TokenizationError):
        Tokenizer.count("hello")

def test_tokenizer_estimates_without_encoding(monkeypatch):
    monkeypatch.setattr(Tokenizer, "_encoding", None)
    monkeypatch.setattr(Tokenizer, "_estimating", True)
    assert Tokenizer.count("x" * 40) == 10

# --- Presenter ---

def test_selected_files_lists_every_file(tmp_path, capsys):
    for i in range(12):
        write_words(tmp_path / f"m{i:02}.py", i + 1)
    document = assemble(tmp_path, list(scanner_for(tmp_path).walk()), words)

    show_selected_files(document)
    out = capsys.readouterr().out
    for i in range(12):
        assert f"m{i:02}.py" in out
    assert out.index("m11.py") < out.index("m00.py")
    assert "Total files: 12" in out
