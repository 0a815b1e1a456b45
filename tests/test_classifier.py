import pytest

from langtrend.application.classifier import EXT_TO_LANGUAGE, classify


@pytest.mark.parametrize(
    "path, expected",
    [
        ("src/main.rs", "Rust"),
        ("Dockerfile", "Dockerfile"),
        ("deploy/docker/Dockerfile", "Dockerfile"),
        ("CMakeLists.txt", "CMake"),
        ("app/models/user.rb", "Ruby"),
        ("web/index.TSX", "TypeScript"),
        ("analysis/model.R", "R"),
        ("notebooks/eda.ipynb", "Jupyter Notebook"),
        ("infra/main.tf", "HCL"),
        ("docs/guide.md", "Markdown"),
        ("config/app.yml", "YAML"),
    ],
)
def test_classify_known_paths(path, expected):
    assert classify(path) == expected


@pytest.mark.parametrize("path", ["README", "LICENSE", "assets/logo.png", "yarn.lock", ".gitignore"])
def test_classify_unknown_paths(path):
    assert classify(path) is None


def test_special_filename_beats_extension():
    # Exact name match is checked before the extension table
    assert classify("CMakeLists.txt") == "CMake"
    assert classify("notes.txt") is None


def test_special_filename_is_case_sensitive():
    assert classify("dockerfile") is None
    assert classify("build.dockerfile") == "Dockerfile"


def test_extension_table_is_lower_case():
    assert all(ext == ext.lower() for ext in EXT_TO_LANGUAGE)
    assert len(set(EXT_TO_LANGUAGE.values())) >= 30
