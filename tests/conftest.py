"""
Shared fixtures: the bundled domain, an engine with the default
pipelines, and sample model outputs.
"""

import json

import pytest

from drapekit.core.engine import Engine, setup_default_pipeline
from drapekit.domain.loader import get_domain


WELL_FORMED = {
    "designName": "V领垂坠连衣裙",
    "designAnalysis": "斜裁前片，领口自然垂坠",
    "difficulty": 3,
    "difficultyReason": "需要控制斜丝方向",
    "estimatedTime": "3-4小时",
    "materials": [{"item": "白坯布", "spec": "中厚全棉", "qty": "2米"}],
    "tools": [{"name": "人台", "purpose": "操作基础"}],
    "steps": [
        {
            "title": "准备坯布",
            "desc": "熨平坯布，标出经纬纱向",
            "technique": "熨烫",
            "icon": "iron",
            "area": "full",
            "tips": "纱向要直",
            "troubles": [],
        },
        {
            "title": "固定前中",
            "desc": "用珠针沿前中线固定",
            "technique": "别针",
            "icon": "pin",
            "area": "chest",
            "tips": "",
            "troubles": [{"q": "布料歪斜怎么办？", "a": "重新对齐纱向"}],
        },
    ],
}

# Cut off mid-step: only fragment salvage can recover it
TRUNCATED = (
    '{"designName": "斜裁裙", "difficulty": 4, "materials": [{"item": "坯布"}], '
    '"steps": [{"title": "准备", "desc": "熨平坯布", "icon": "iron"}, '
    '{"title": "固定", "desc": "用珠针固定", "icon": "pin"}, '
    '{"title": "修剪", "desc": "剪去多'
)

REFUSAL = "抱歉，我无法分析这张图片中的服装结构。"


@pytest.fixture
def well_formed_text():
    return json.dumps(WELL_FORMED, ensure_ascii=False)


@pytest.fixture
def well_formed_doc():
    return json.loads(json.dumps(WELL_FORMED))


@pytest.fixture
def truncated_text():
    return TRUNCATED


@pytest.fixture
def refusal_text():
    return REFUSAL


@pytest.fixture(scope="session")
def domain():
    return get_domain("draping")


@pytest.fixture
def engine(domain):
    """Create an engine with the default pipelines."""
    eng = Engine(domain)
    setup_default_pipeline(eng)
    return eng
