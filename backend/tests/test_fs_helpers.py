"""导出文件路径与写入测试"""

from contributor_analytics.services.fs_helpers import (
    file_exists,
    get_overall_file_path,
    get_repo_file_path,
    write_to_file,
)


def test_export_paths_and_write(tmp_path):
    repo_path = get_repo_file_path(tmp_path, "acme/api", "summaries", "week", "2024-01-01.md")
    overall_path = get_overall_file_path(tmp_path, "summaries", "month", "2024-01-01.md")

    assert repo_path == tmp_path / "acme_api" / "summaries" / "week" / "2024-01-01.md"
    assert overall_path == tmp_path / "summaries" / "month" / "2024-01-01.md"
    assert not file_exists(repo_path)

    write_to_file(repo_path, "hello")

    assert file_exists(repo_path)
    assert repo_path.read_text(encoding="utf-8") == "hello"


def test_file_exists_is_false_for_directories(tmp_path):
    assert not file_exists(tmp_path)
