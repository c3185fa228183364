"""
Unit tests for FileScanner.

Covers per-language detection, comment stripping, line accounting and the
per-file error paths that must never abort a scan.
"""

from pathlib import Path

import pytest

from envscan.core.file_scanner import FileScanner, get_default_registry
from envscan.core.security import Severity


def _scan(tmp_path: Path, name: str, content: str | bytes, **scanner_kwargs):
    file_path = tmp_path / name
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        file_path.write_bytes(content)
    else:
        file_path.write_text(content, encoding="utf-8")
    language = get_default_registry().detect(file_path)
    assert language is not None, f"no language for {name}"
    return FileScanner(**scanner_kwargs).scan_file(file_path, tmp_path, language)


def _names(outcome) -> list[str]:
    return [record.variable_name for record in outcome.records]


@pytest.mark.parametrize(
    "name, content, expected",
    [
        ("app.js", "const key = process.env.API_KEY;\n", ["API_KEY"]),
        ("app.js", 'const port = process.env["PORT"];\n', ["PORT"]),
        ("app.mjs", "const port = process.env['PORT'];\n", ["PORT"]),
        ("main.tsx", "const url = import.meta.env.VITE_API_URL;\n", ["VITE_API_URL"]),
        ("config.py", 'key = os.getenv("API_KEY")\n', ["API_KEY"]),
        ("config.py", "db = os.environ['DB_URL']\n", ["DB_URL"]),
        ("config.py", 'debug = os.environ.get("DEBUG", "0")\n', ["DEBUG"]),
        ("config.py", 'home = environ["HOME"]\n', ["HOME"]),
        ("main.go", 'url := os.Getenv("DB_URL")\n', ["DB_URL"]),
        ("main.go", 'v, ok := os.LookupEnv("TOKEN")\n', ["TOKEN"]),
        ("main.rs", 'let url = env::var("DB_URL").unwrap();\n', ["DB_URL"]),
        ("main.rs", 'let url = std::env::var("DB_URL").unwrap();\n', ["DB_URL"]),
        ("main.rs", 'const V: &str = env!("CARGO_PKG_VERSION");\n', ["CARGO_PKG_VERSION"]),
        ("main.rs", 'const V: Option<&str> = option_env!("BUILD_ID");\n', ["BUILD_ID"]),
        ("Main.java", 'String home = System.getenv("JAVA_HOME");\n', ["JAVA_HOME"]),
        ("index.php", "$host = $_ENV['DB_HOST'];\n", ["DB_HOST"]),
        ("index.php", "$name = env('APP_NAME');\n", ["APP_NAME"]),
        ("index.php", "$path = getenv('PATH');\n", ["PATH"]),
        ("deploy.sh", 'echo "${HOME}/bin"\n', ["HOME"]),
        ("deploy.sh", "cd $WORKDIR\n", ["WORKDIR"]),
        ("deploy.sh", "export APP_ENV=production\n", ["APP_ENV"]),
        ("values.yaml", "url: ${DATABASE_URL}\n", ["DATABASE_URL"]),
        ("settings.toml", 'token = "${GITHUB_TOKEN}"\n', ["GITHUB_TOKEN"]),
        ("app.rb", "key = ENV['SECRET_KEY_BASE']\n", ["SECRET_KEY_BASE"]),
        ("app.rb", 'port = ENV.fetch("PORT", 3000)\n', ["PORT"]),
        ("Program.cs", 'var s = Environment.GetEnvironmentVariable("CONN");\n', ["CONN"]),
        ("main.c", 'char *home = getenv("HOME");\n', ["HOME"]),
        ("config.exs", 'url = System.get_env("DATABASE_URL")\n', ["DATABASE_URL"]),
        ("App.swift", 'let k = ProcessInfo.processInfo.environment["API_KEY"]\n', ["API_KEY"]),
        ("run.pl", "my $home = $ENV{HOME};\n", ["HOME"]),
        ("setup.ps1", "Write-Host $env:USERPROFILE\n", ["USERPROFILE"]),
        ("Dockerfile", "ENV PATH=${APP_HOME}/bin\n", ["APP_HOME"]),
    ],
)
def test_detects_language_idioms(tmp_path, name, content, expected):
    outcome = _scan(tmp_path, name, content)

    assert outcome.error is None
    assert _names(outcome) == expected


def test_record_fields(tmp_path):
    content = "import os\n\nkey = os.getenv('API_KEY')\n"
    outcome = _scan(tmp_path, "lib/config.py", content)

    assert len(outcome.records) == 1
    record = outcome.records[0]
    assert record.file_path == "lib/config.py"
    assert record.line_number == 3
    assert record.variable_name == "API_KEY"
    assert record.language == "python"
    assert record.context == "key = os.getenv('API_KEY')"


def test_multiple_usages_in_one_file(tmp_path):
    content = (
        "const a = process.env.API_KEY;\n"
        "const b = process.env.DB_URL;\n"
        "const c = process.env.API_KEY;\n"
    )
    outcome = _scan(tmp_path, "src/app.js", content)

    assert [(r.variable_name, r.line_number) for r in outcome.records] == [
        ("API_KEY", 1),
        ("DB_URL", 2),
        ("API_KEY", 3),
    ]


def test_same_variable_twice_on_one_line(tmp_path):
    content = "const x = process.env.HOST + process.env.HOST;\n"
    outcome = _scan(tmp_path, "app.js", content)

    assert _names(outcome) == ["HOST", "HOST"]
    assert {r.line_number for r in outcome.records} == {1}


def test_every_match_is_kept_when_patterns_overlap(tmp_path):
    # ${VAR} and export VAR= both fire on the same line
    outcome = _scan(tmp_path, "env.sh", "export TARGET=${SOURCE}\n")

    assert sorted(_names(outcome)) == ["SOURCE", "TARGET"]


class TestCommentStripping:
    """Usages inside comments are ignored and line numbers do not drift."""

    def test_line_comment_ignored(self, tmp_path):
        content = "// process.env.OLD_KEY\nconst k = process.env.NEW_KEY;\n"
        outcome = _scan(tmp_path, "app.js", content)

        assert _names(outcome) == ["NEW_KEY"]
        assert outcome.records[0].line_number == 2

    def test_block_comment_keeps_line_numbers(self, tmp_path):
        content = (
            "/*\n"
            " * process.env.IN_COMMENT\n"
            " */\n"
            "const k = process.env.AFTER_BLOCK;\n"
        )
        outcome = _scan(tmp_path, "app.ts", content)

        assert _names(outcome) == ["AFTER_BLOCK"]
        assert outcome.records[0].line_number == 4

    def test_python_docstring_and_hash_comment(self, tmp_path):
        content = (
            '"""\n'
            'Reads os.getenv("IN_DOCSTRING").\n'
            '"""\n'
            '# os.getenv("IN_COMMENT")\n'
            'value = os.getenv("REAL")  # os.getenv("TRAILING")\n'
        )
        outcome = _scan(tmp_path, "mod.py", content)

        assert _names(outcome) == ["REAL"]
        assert outcome.records[0].line_number == 5

    def test_context_is_the_original_line(self, tmp_path):
        content = 'value = os.getenv("REAL")  # explained here\n'
        outcome = _scan(tmp_path, "mod.py", content)

        assert outcome.records[0].context == 'value = os.getenv("REAL")  # explained here'

    def test_shell_hash_inside_word_is_not_a_comment(self, tmp_path):
        outcome = _scan(tmp_path, "len.sh", 'echo "${#ARGS}" $COUNT\n')

        assert "COUNT" in _names(outcome)

    def test_ruby_block_comment(self, tmp_path):
        content = "=begin\nENV['HIDDEN']\n=end\nENV['SHOWN']\n"
        outcome = _scan(tmp_path, "app.rb", content)

        assert _names(outcome) == ["SHOWN"]
        assert outcome.records[0].line_number == 4


class TestLineBreaks:
    """Only \\n starts a new line; other separators stay inside their line."""

    def test_form_feed_does_not_add_a_line(self, tmp_path):
        outcome = _scan(tmp_path, "a.py", "x = 1\x0c\nos.getenv('A')\n")

        assert _names(outcome) == ["A"]
        assert outcome.records[0].line_number == 2

    def test_unicode_line_separator_in_string(self, tmp_path):
        outcome = _scan(tmp_path, "a.js", "const s = 'a\u2028b';\nprocess.env.B\n")

        assert _names(outcome) == ["B"]
        assert outcome.records[0].line_number == 2

    def test_separators_inside_block_comment(self, tmp_path):
        content = "/* page\x0cbreak\u2029 */\nconst k = process.env.AFTER;\n"
        outcome = _scan(tmp_path, "app.js", content)

        assert _names(outcome) == ["AFTER"]
        assert outcome.records[0].line_number == 2

    def test_crlf_context_has_no_carriage_return(self, tmp_path):
        outcome = _scan(tmp_path, "mod.py", "import os\r\nkey = os.getenv('KEY')\r\n")

        assert outcome.records[0].line_number == 2
        assert outcome.records[0].context == "key = os.getenv('KEY')"

    def test_security_issue_line_after_form_feed(self, tmp_path):
        outcome = _scan(tmp_path, "settings.py", '\x0c\n\x0b\npassword = "hunter2"\n')

        assert [issue.line_number for issue in outcome.security_issues] == [3]


class TestFileErrors:
    """Per-file failures are recorded on the outcome, never raised."""

    def test_empty_file(self, tmp_path):
        outcome = _scan(tmp_path, "empty.py", "")

        assert outcome.error is None
        assert outcome.records == []

    def test_invalid_utf8(self, tmp_path):
        outcome = _scan(tmp_path, "latin1.py", b"name = 'caf\xe9'\n")

        assert outcome.records == []
        assert outcome.error is not None
        assert outcome.error.file_path == "latin1.py"
        assert "UTF-8" in outcome.error.message

    def test_nul_bytes(self, tmp_path):
        outcome = _scan(tmp_path, "blob.js", b"process.env.X\x00\x01\x02")

        assert outcome.records == []
        assert "Binary" in outcome.error.message

    def test_oversized_file(self, tmp_path):
        content = "x = 1\n" * 100
        outcome = _scan(tmp_path, "big.py", content, max_file_size=50)

        assert outcome.records == []
        assert "too large" in outcome.error.message

    def test_missing_file(self, tmp_path):
        language = get_default_registry().get("python")
        outcome = FileScanner().scan_file(tmp_path / "gone.py", tmp_path, language)

        assert outcome.records == []
        assert outcome.error is not None
        assert outcome.error.file_path == "gone.py"


class TestSecurityChecks:
    """Hardcoded secret heuristics run on lines without usages."""

    def test_hardcoded_password_flagged(self, tmp_path):
        outcome = _scan(tmp_path, "settings.py", 'password = "hunter2"\n')

        assert outcome.records == []
        assert len(outcome.security_issues) == 1
        issue = outcome.security_issues[0]
        assert issue.rule == "password-assignment"
        assert issue.severity is Severity.HIGH
        assert issue.line_number == 1
        assert "hunter2" not in issue.message

    def test_line_reading_env_not_flagged(self, tmp_path):
        outcome = _scan(tmp_path, "settings.py", 'password = os.environ["PASSWORD"]\n')

        assert _names(outcome) == ["PASSWORD"]
        assert outcome.security_issues == []

    def test_detection_can_be_disabled(self, tmp_path):
        outcome = _scan(
            tmp_path, "settings.py", 'password = "hunter2"\n', detect_secrets=False
        )

        assert outcome.security_issues == []
