"""Shared fixtures."""

import pytest

from pillarmap.schemas.roadmap import RoadmapData


@pytest.fixture
def roadmap_payload():
    """Roadmap JSON as returned by the parsing model."""
    return {
        "title": "FlowX: Deliverables Matrix (2025-2026)",
        "subtitle": "Key Deliverables by Annual Theme & Strategic Pillar",
        "pillars": [
            {"id": "p1", "name": "Core Platform & Architecture"},
            {"id": "p2", "name": "Hybrid Cloud & Security"},
            {"id": "p3", "name": "Observability"},
            {"id": "p4", "name": "GenAI Integration"},
        ],
        "timeframes": [
            {
                "id": "t1",
                "date": "2025 - Q1 & Q2",
                "name": "FlowX Build-out",
                "deliverables": [
                    {
                        "pillarId": "p1",
                        "tasks": [
                            "Publish FlowX Architecture White Paper",
                            "Publish FlowX Architecture Specification",
                        ],
                    },
                    {"pillarId": "p3", "tasks": ["Core Business Monitoring Dashboards & Alerting System"]},
                    {"pillarId": "p2", "tasks": ["Unified Security Framework Implemented"]},
                ],
            },
            {
                "id": "t2",
                "date": "2025 - Q3 & Q4",
                "name": "AI Empowerment",
                "deliverables": [
                    {"pillarId": "p1", "tasks": ["FlowX EDA Infrastructure Go-Live"]},
                    {"pillarId": "p4", "tasks": ["Deliver Core AI Components"]},
                    {"pillarId": "p2", "tasks": []},
                ],
            },
            {
                "id": "t3",
                "date": "2026 - Q3 & Q4",
                "name": "AIOps & Integrations",
                "deliverables": [
                    {"pillarId": "p9", "tasks": ["Orphaned task"]},
                    {"pillarId": "p3", "tasks": ["Full L1/L2 Monitoring Coverage"]},
                ],
            },
        ],
    }


@pytest.fixture
def roadmap(roadmap_payload):
    """Validated canonical record."""
    return RoadmapData.model_validate(roadmap_payload)


@pytest.fixture
def small_roadmap():
    """Two pillars, one timeframe with deliverables for p1 only."""
    return RoadmapData.model_validate(
        {
            "title": "Small",
            "subtitle": "",
            "pillars": [{"id": "p1", "name": "One"}, {"id": "p2", "name": "Two"}],
            "timeframes": [
                {
                    "id": "t1",
                    "date": "2025",
                    "name": "First",
                    "deliverables": [{"pillarId": "p1", "tasks": ["A", "B"]}],
                }
            ],
        }
    )
