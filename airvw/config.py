"""配置加载模块"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import toml

from .models.config import CodeupConfig, LLMConfig, ReviewerConfig

DEFAULT_CONFIG_PATH = ".airvw.toml"
DEFAULT_CONFIG_CONTENT = """# airvw 配置文件

[codeup]
token = ""  # 也可通过环境变量 AIRVW_YUNXIAO_TOKEN 设置
org_id = ""
repo_id = 0
domain = "openapi-rdc.aliyuncs.com"

[llm]
model = "qwen3-coder-plus"
api_key = ""  # 也可通过环境变量 AIRVW_BAICHUAN_KEY 设置
base_url = "https://dashscope.aliyuncs.com/compatible-mode/v1"
temperature = 0.2
top_p = 0.9

[reviewer]
language = "golang"  # golang/java/python/javascript
level = "block"  # block/high/medium/suggest
"""

# 环境变量 -> (配置段, 字段)
ENV_OVERRIDES = {
    "AIRVW_YUNXIAO_TOKEN": ("codeup", "token"),
    "AIRVW_BAICHUAN_KEY": ("llm", "api_key"),
    "AIRVW_LLM_BASE_URL": ("llm", "base_url"),
}


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """从当前目录向上查找配置文件"""
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir
    while True:
        config_path = current / DEFAULT_CONFIG_PATH
        if config_path.exists():
            return config_path
        if current == current.parent:
            return None
        current = current.parent


def load_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReviewerConfig:
    """加载配置

    优先级：命令行参数 > 环境变量 > 配置文件 > 默认值。
    没有配置文件时只使用环境变量和命令行参数。

    Args:
        config_path: 配置文件路径，如果为 None 则自动查找
        overrides: 命令行参数，值为 None 的项会被忽略；
            ``codeup``/``llm`` 两段用嵌套字典传入
        environ: 环境变量，默认 os.environ

    Returns:
        ReviewerConfig: 配置对象

    Raises:
        FileNotFoundError: 指定的配置文件不存在
        ValidationError: 配置格式错误
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")
    if config_path is None:
        config_path = find_config_file()

    data = toml.load(config_path) if config_path is not None else {}
    if environ is None:
        environ = os.environ

    codeup_data = dict(data.get("codeup", {}))
    llm_data = dict(data.get("llm", {}))
    reviewer_data = dict(data.get("reviewer", {}))
    sections = {"codeup": codeup_data, "llm": llm_data}

    # 支持环境变量覆盖
    for env_key, (section, key) in ENV_OVERRIDES.items():
        if environ.get(env_key):
            sections[section][key] = environ[env_key]

    for key, value in (overrides or {}).items():
        if key in sections:
            sections[key].update({k: v for k, v in value.items() if v is not None})
        elif value is not None:
            reviewer_data[key] = value

    reviewer_data["codeup"] = CodeupConfig(**codeup_data)
    reviewer_data["llm"] = LLMConfig(**llm_data)
    return ReviewerConfig(**reviewer_data)


def create_default_config(path: Path | None = None) -> Path:
    """创建默认配置文件"""
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_PATH

    if path.exists():
        raise FileExistsError(f"配置文件已存在: {path}")

    path.write_text(DEFAULT_CONFIG_CONTENT, encoding="utf-8")
    return path
