"""导出文件路径与写入"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _safe_repo_dir(repo_id: str) -> str:
    # owner/name -> owner_name
    return repo_id.replace("/", "_")


def get_repo_file_path(
    output_dir: str | Path,
    repo_id: str,
    category: str,
    interval_type: str,
    filename: str,
) -> Path:
    return Path(output_dir) / _safe_repo_dir(repo_id) / category / interval_type / filename


def get_overall_file_path(
    output_dir: str | Path,
    category: str,
    interval_type: str,
    filename: str,
) -> Path:
    return Path(output_dir) / category / interval_type / filename


def file_exists(path: str | Path) -> bool:
    return Path(path).is_file()


def write_to_file(path: str | Path, content: str) -> None:
    """写入文本文件，必要时创建父目录"""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.debug(f"已写入文件: {target}")
