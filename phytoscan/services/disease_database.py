"""
Static disease reference database keyed by stage code.

The raw table is validated into DiseaseInfo models at import time, so a
misspelled treatment category or a missing stage fails loudly on startup
instead of rendering oddly later.
"""

from pydantic import TypeAdapter

from phytoscan.models.disease import DiseaseInfo, DiseaseStage


_RAW_DATABASE = {
    "H0": {
        "name": "Healthy Leaf",
        "severity": 0,
        "symptoms": [
            "Uniform green coloration",
            "Intact leaf margins",
            "No lesions or spotting",
        ],
        "visualDescription": "Even pigmentation across the blade with a clean, unbroken surface.",
        "biologicalInterpretation": "Photosynthetic tissue is intact and no pathogen activity is visible.",
        "prognosis": "Excellent. Continue routine monitoring.",
        "treatment": {
            "preventive": [
                "Inspect the canopy weekly, focusing on lower leaves",
                "Keep foliage dry by watering at the base in the morning",
            ],
            "nutritional": ["Maintain balanced NPK fertilization"],
            "photographyTips": [
                "Photograph single leaves against a plain background",
                "Use diffuse daylight and avoid direct sun glare",
            ],
        },
    },
    "N0": {
        "name": "No Disease Detected",
        "severity": 0,
        "symptoms": [
            "Minor discoloration without lesions",
            "Mechanical or insect feeding damage",
            "Nutrient-related yellowing",
        ],
        "visualDescription": "Irregular marks that do not follow a pathogen pattern.",
        "biologicalInterpretation": (
            "Changes are abiotic (weather, nutrition, mechanical injury) and are "
            "not spreading from an infection site."
        ),
        "prognosis": "Good once the underlying stress is corrected.",
        "treatment": {
            "cultural": [
                "Check irrigation regularity and drainage",
                "Remove physically damaged leaves if they are heavily torn",
            ],
            "nutritional": [
                "Run a soil test if yellowing persists",
                "Apply micronutrient foliar feed when deficiency is confirmed",
            ],
            "tips": ["Rescan in 5-7 days to confirm the condition is not progressing"],
        },
    },
    "S1": {
        "name": "Early Leaf Spot",
        "severity": 1,
        "symptoms": [
            "Small circular brown spots (1-3 mm)",
            "Faint yellow halo around spots",
            "Lesions concentrated on older leaves",
        ],
        "visualDescription": "A handful of isolated pinpoint lesions, mostly on the lower canopy.",
        "biologicalInterpretation": (
            "Fungal spores have germinated and colonized small patches of tissue; "
            "sporulation has not yet started at scale."
        ),
        "prognosis": "Very good with prompt cultural control.",
        "treatment": {
            "immediate": [
                "Remove and bag the spotted leaves",
                "Stop overhead irrigation",
            ],
            "cultural": [
                "Increase plant spacing to improve air flow",
                "Clear fallen leaf debris from the soil surface",
            ],
            "preventive": ["Rotate away from host crops for at least two seasons"],
        },
    },
    "S2": {
        "name": "Spreading Leaf Spot",
        "severity": 2,
        "symptoms": [
            "Spots enlarging to 3-10 mm with concentric rings",
            "Lesions coalescing into patches",
            "Yellowing of surrounding tissue",
        ],
        "visualDescription": "Multiple lesions with target-like rings, some merging.",
        "biologicalInterpretation": (
            "Active sporulation is spreading inoculum to new leaves; photosynthetic "
            "area is measurably reduced."
        ),
        "prognosis": "Fair. Yield loss is likely without chemical control.",
        "treatment": {
            "immediate": [
                "Prune all visibly infected foliage",
                "Disinfect tools between plants",
            ],
            "chemical": [
                "Apply a protectant fungicide (chlorothalonil or mancozeb) at label rate",
                "Repeat every 7-10 days while conditions stay humid",
            ],
            "cultural": ["Mulch to stop soil splash onto lower leaves"],
            "recovery": ["Side-dress with nitrogen once new growth is clean"],
        },
    },
    "S3": {
        "name": "Advanced Blight",
        "severity": 3,
        "symptoms": [
            "Large necrotic areas covering much of the leaf",
            "Leaf curling and collapse",
            "Defoliation of the lower canopy",
        ],
        "visualDescription": "Extensive dead tissue with dark, dry margins across the blade.",
        "biologicalInterpretation": (
            "The pathogen has overwhelmed host defenses; tissue death is advancing "
            "faster than new growth."
        ),
        "prognosis": "Poor for affected plants. Protect neighboring plants.",
        "treatment": {
            "immediate": [
                "Remove severely affected plants and destroy them away from the field",
                "Do not compost infected material",
            ],
            "chemical": [
                "Apply a systemic fungicide (azoxystrobin or difenoconazole) to remaining plants",
                "Alternate fungicide groups to limit resistance",
            ],
            "preventive": [
                "Use resistant varieties next season",
                "Plan a three-year rotation for this plot",
            ],
            "tips": ["Consult a local extension officer to confirm the pathogen"],
        },
    },
}


def load_disease_database(raw: dict) -> dict[DiseaseStage, DiseaseInfo]:
    """
    Validate a raw stage -> entry mapping.

    Raises:
        pydantic.ValidationError: unknown stage code, unknown treatment
            category or malformed entry
        ValueError: a stage code has no entry
    """
    database = TypeAdapter(dict[DiseaseStage, DiseaseInfo]).validate_python(raw)
    missing = [stage.value for stage in DiseaseStage if stage not in database]
    if missing:
        raise ValueError(f"Disease database is missing stages: {missing}")
    return database


DISEASE_DATABASE = load_disease_database(_RAW_DATABASE)


def get_disease(stage: DiseaseStage) -> DiseaseInfo:
    return DISEASE_DATABASE[DiseaseStage(stage)]
