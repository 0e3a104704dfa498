import json

import pytest


@pytest.fixture
def sample_plants():
    """A small catalog in the upload format (camelCase keys, list components)."""
    return [
        {
            "id": "1",
            "name": "Turmeric",
            "scientificName": "Curcuma longa",
            "benefits": ["anti-inflammatory", "pain relief", "digestive health", "antioxidant", "immune support"],
            "components": ["curcumin", "essential oils", "fiber", "potassium"],
            "description": "A golden spice used in Ayurvedic medicine.",
            "usageMethods": ["Tea preparation: 1 tsp turmeric powder in warm milk"],
            "precautions": ["May interact with blood thinners"],
        },
        {
            "id": "2",
            "name": "Ginger",
            "scientificName": "Zingiber officinale",
            "benefits": ["nausea relief", "digestive health", "anti-inflammatory", "pain relief", "circulation"],
            "components": "gingerol, shogaol, essential oils",
            "description": "A warming root known to reduce nausea.",
        },
        {
            "id": "3",
            "name": "Chamomile",
            "scientificName": "Matricaria chamomilla",
            "benefits": ["calming", "sleep aid", "digestive health", "anti-inflammatory", "stress relief"],
            "components": ["apigenin", "flavonoids"],
            "description": "A gentle flower that promotes relaxation.",
        },
        {
            "id": "4",
            "name": "Echinacea",
            "scientificName": "Echinacea purpurea",
            "benefits": ["immune support", "cold relief", "antiviral", "anti-inflammatory", "wound healing"],
            "components": ["alkamides", "polysaccharides"],
            "description": "A purple flowering plant.",
        },
        {
            "id": "5",
            "name": "Aloe Vera",
            "scientificName": "Aloe barbadensis",
            "benefits": ["skin healing", "burns relief", "digestive health", "hydration", "anti-inflammatory"],
            "components": ["aloin", "polysaccharides"],
            "description": "A succulent with a soothing gel.",
        },
    ]


@pytest.fixture
def catalog_path(tmp_path, sample_plants):
    path = tmp_path / "plants.json"
    path.write_text(json.dumps(sample_plants), encoding="utf-8")
    return str(path)
