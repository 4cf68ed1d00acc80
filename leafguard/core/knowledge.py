"""
Static knowledge base of diagnostic labels.

Every :class:`Label` maps to exactly one :class:`KnowledgeEntry`. The table is
frozen at import and checked for totality, so adding a label without an entry
(or an entry without a label) fails loudly on startup.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from leafguard.core.schemas import IssueType, Label, Severity


@dataclass(frozen=True)
class AlternativeSpec:
    name: str
    offset: float  # subtracted from the primary confidence


@dataclass(frozen=True)
class KnowledgeEntry:
    label: Label
    name: str
    description: str
    severity: Severity
    confidence_ceiling: float
    type: IssueType
    symptoms: tuple[str, ...]
    control_measures: tuple[str, ...]
    alternatives: tuple[AlternativeSpec, ...]


_ENTRIES = (
    KnowledgeEntry(
        label=Label.APHIDS,
        name="Aphids Infestation",
        description=(
            "Small, soft-bodied insects (1-4mm) that cluster on new growth, undersides of leaves, and stems. "
            "They pierce plant tissue to suck sap, causing yellowing, wilting, stunted growth, and honeydew secretion."
        ),
        severity=Severity.MODERATE,
        confidence_ceiling=0.88,
        type=IssueType.PEST,
        symptoms=(
            "Curled or distorted leaves",
            "Yellowing of foliage",
            "Sticky honeydew on leaves",
            "Stunted plant growth",
            "Presence of ants",
        ),
        control_measures=(
            "Spray with 2% neem oil solution every 7-10 days",
            "Use insecticidal soap (1-2% concentration) for immediate control",
            "Release beneficial insects: ladybugs (50-100 per plant), lacewings",
            "Apply systemic insecticides (imidacloprid) for severe infestations",
            "Remove heavily infested leaves and dispose in sealed bags",
            "Use reflective mulch to confuse aphids during early season",
        ),
        alternatives=(
            AlternativeSpec("Whiteflies", 0.16),
            AlternativeSpec("Scale Insects", 0.23),
            AlternativeSpec("Thrips", 0.43),
        ),
    ),
    KnowledgeEntry(
        label=Label.POWDERY_MILDEW,
        name="Powdery Mildew",
        description=(
            "Fungal disease caused by Erysiphales fungi, appearing as white to gray powdery spots on leaves, "
            "stems, and buds. Thrives in warm days (68-78°F) and cool nights with high humidity."
        ),
        severity=Severity.HIGH,
        confidence_ceiling=0.94,
        type=IssueType.DISEASE,
        symptoms=(
            "White powdery coating on leaves",
            "Leaf yellowing and browning",
            "Stunted growth",
            "Premature leaf drop",
            "Reduced fruit quality",
        ),
        control_measures=(
            "Apply sulfur-based fungicides (0.5-1% concentration) weekly",
            "Use copper-based fungicides for organic control",
            "Spray baking soda solution (1 tsp per quart water) as preventive",
            "Improve air circulation by proper plant spacing (30% more than normal)",
            "Remove and destroy infected plant parts immediately",
            "Avoid overhead watering - use drip irrigation",
            "Apply milk spray (1:10 ratio with water) as biological control",
        ),
        alternatives=(
            AlternativeSpec("Downy Mildew", 0.18),
            AlternativeSpec("White Rust", 0.25),
            AlternativeSpec("Sooty Mold", 0.40),
        ),
    ),
    KnowledgeEntry(
        label=Label.LEAF_SPOT,
        name="Bacterial Leaf Spot",
        description=(
            "Bacterial infection caused by Xanthomonas or Pseudomonas species, creating dark, water-soaked spots "
            "with yellow halos. Spreads rapidly in warm, humid conditions through water splash."
        ),
        severity=Severity.MODERATE,
        confidence_ceiling=0.91,
        type=IssueType.DISEASE,
        symptoms=(
            "Dark water-soaked spots with yellow halos",
            "Leaf yellowing and defoliation",
            "Brown to black lesions",
            "Bacterial ooze in wet conditions",
        ),
        control_measures=(
            "Apply copper-based bactericides (copper sulfate 0.5-1%)",
            "Use streptomycin sulfate for severe bacterial infections",
            "Remove infected leaves immediately and destroy",
            "Improve drainage and avoid overhead irrigation",
            "Disinfect tools with 70% alcohol between plants",
            "Use pathogen-free seeds and certified transplants",
            "Apply preventive copper sprays in high-risk periods",
        ),
        alternatives=(
            AlternativeSpec("Fungal Leaf Spot", 0.15),
            AlternativeSpec("Anthracnose", 0.22),
            AlternativeSpec("Early Blight", 0.28),
        ),
    ),
    KnowledgeEntry(
        label=Label.SPIDER_MITES,
        name="Spider Mites",
        description=(
            "Tiny arachnids (0.4mm) that cause stippling damage on leaves, often with fine webbing. Thrive in hot, "
            "dry conditions and can reproduce rapidly (generation every 10-14 days)."
        ),
        severity=Severity.HIGH,
        confidence_ceiling=0.92,
        type=IssueType.PEST,
        symptoms=(
            "Fine stippling on leaf surface",
            "Webbing on leaves and stems",
            "Yellowing and bronzing of leaves",
            "Premature leaf drop",
            "Reduced plant vigor",
        ),
        control_measures=(
            "Increase humidity around plants (mist regularly)",
            "Use miticide sprays (abamectin or bifenthrin) every 5-7 days",
            "Release predatory mites (Phytoseiulus persimilis) as biological control",
            "Wash plants with strong water spray to dislodge mites",
            "Apply neem oil (2-3%) or insecticidal soap weekly",
            "Remove heavily infested leaves and destroy",
            "Use reflective mulch to reduce heat stress",
        ),
        alternatives=(
            AlternativeSpec("Thrips", 0.12),
            AlternativeSpec("Aphids", 0.19),
            AlternativeSpec("Leaf Miners", 0.51),
        ),
    ),
    KnowledgeEntry(
        label=Label.CATERPILLARS,
        name="Caterpillar Damage",
        description=(
            "Larvae of moths or butterflies that feed on plant foliage, creating irregular holes and potentially "
            "causing complete defoliation. Size varies from 1-5cm depending on species and stage."
        ),
        severity=Severity.MODERATE,
        confidence_ceiling=0.89,
        type=IssueType.PEST,
        symptoms=(
            "Irregular holes in leaves",
            "Chewed leaf edges",
            "Presence of frass (droppings)",
            "Visible caterpillars on plants",
            "Skeletonized leaves",
        ),
        control_measures=(
            "Hand-pick caterpillars when population is manageable (<10 per plant)",
            "Apply Bacillus thuringiensis (Bt) spray weekly during larval stage",
            "Use pheromone traps for adult moths (1 trap per 50 plants)",
            "Encourage beneficial insects: parasitic wasps, spiders",
            "Apply spinosad-based insecticides for organic control",
            "Use row covers during peak moth flight periods",
            "Apply appropriate insecticides (chlorantraniliprole) if severe",
        ),
        alternatives=(
            AlternativeSpec("Leaf Miners", 0.28),
            AlternativeSpec("Beetles", 0.34),
            AlternativeSpec("Grasshoppers", 0.46),
        ),
    ),
    KnowledgeEntry(
        label=Label.RUST,
        name="Plant Rust Disease",
        description=(
            "Fungal disease caused by various rust fungi, producing orange, red, or brown pustules (uredinia) on "
            "leaves and stems. Spreads via airborne spores and favors humid conditions."
        ),
        severity=Severity.HIGH,
        confidence_ceiling=0.93,
        type=IssueType.DISEASE,
        symptoms=(
            "Orange to brown pustules on leaves",
            "Yellow spots on upper leaf surface",
            "Premature leaf drop",
            "Weakened plant structure",
            "Reduced yield",
        ),
        control_measures=(
            "Apply preventive fungicides (propiconazole or tebuconazole)",
            "Use copper-based fungicides for organic management",
            "Remove infected plant debris and destroy completely",
            "Ensure excellent air circulation (space plants 25% wider)",
            "Avoid overhead watering - use ground-level irrigation",
            "Plant rust-resistant varieties when available",
            "Apply sulfur dust (2-3 lbs per acre) as preventive measure",
        ),
        alternatives=(
            AlternativeSpec("Leaf Spot", 0.14),
            AlternativeSpec("Late Blight", 0.20),
            AlternativeSpec("Anthracnose", 0.34),
        ),
    ),
    KnowledgeEntry(
        label=Label.LATE_BLIGHT,
        name="Late Blight",
        description=(
            "Devastating oomycete disease caused by Phytophthora infestans. Affects potatoes and tomatoes, causing "
            "rapid plant death in cool, wet conditions. Can destroy entire crops within days."
        ),
        severity=Severity.CRITICAL,
        confidence_ceiling=0.96,
        type=IssueType.DISEASE,
        symptoms=(
            "Dark water-soaked lesions on leaves",
            "White fuzzy growth on leaf undersides",
            "Brown to black stem lesions",
            "Rapid plant collapse",
            "Potato tuber rot",
        ),
        control_measures=(
            "Apply preventive fungicides (metalaxyl + mancozeb) before symptoms appear",
            "Use copper-based fungicides in organic systems",
            "Destroy infected plants immediately - do not compost",
            "Improve air circulation and reduce leaf wetness",
            "Avoid overhead irrigation completely",
            "Plant certified disease-free seed potatoes/transplants",
            "Monitor weather for favorable disease conditions (cool + wet)",
        ),
        alternatives=(
            AlternativeSpec("Early Blight", 0.18),
            AlternativeSpec("Bacterial Spot", 0.31),
            AlternativeSpec("Septoria Leaf Spot", 0.39),
        ),
    ),
    KnowledgeEntry(
        label=Label.THRIPS,
        name="Thrips Damage",
        description=(
            "Tiny slender insects (1-2mm) that rasp leaf surfaces and suck plant juices, causing silvery stippling "
            "and distortion. Can transmit viral diseases and thrive in warm, dry conditions."
        ),
        severity=Severity.MODERATE,
        confidence_ceiling=0.87,
        type=IssueType.PEST,
        symptoms=(
            "Silvery stippling on leaves",
            "Black specks (thrips excrement)",
            "Leaf curling and distortion",
            "Silvery appearance to foliage",
            "Stunted growth",
        ),
        control_measures=(
            "Use blue sticky traps (1 per 10 plants) for monitoring and control",
            "Apply insecticidal soap (2-3%) or neem oil weekly",
            "Release predatory mites (Amblyseius cucumeris) for biological control",
            "Use spinosad-based insecticides for severe infestations",
            "Improve humidity levels around plants",
            "Remove weeds that serve as alternate hosts",
            "Apply systemic insecticides (imidacloprid) if necessary",
        ),
        alternatives=(
            AlternativeSpec("Spider Mites", 0.16),
            AlternativeSpec("Aphids", 0.29),
            AlternativeSpec("Whiteflies", 0.38),
        ),
    ),
    KnowledgeEntry(
        label=Label.HEALTHY,
        name="Healthy Plant",
        description=(
            "No significant pest or disease issues detected. Plant shows good vigor with proper coloration, no "
            "visible damage, and normal growth patterns. Continue preventive care."
        ),
        severity=Severity.NONE,
        confidence_ceiling=0.97,
        type=IssueType.HEALTHY,
        symptoms=(
            "Vibrant green coloration",
            "No visible damage or spots",
            "Normal growth rate",
            "No pest presence",
            "Good leaf structure",
        ),
        control_measures=(
            "Continue current care routine and monitoring",
            "Maintain regular inspection schedule (weekly)",
            "Ensure proper watering and fertilization program",
            "Maintain adequate sunlight and air circulation",
            "Practice preventive measures like crop rotation",
            "Keep area free of plant debris and weeds",
            "Monitor for early signs of stress or pest activity",
        ),
        alternatives=(),
    ),
)


def _build(entries: tuple[KnowledgeEntry, ...]) -> Mapping[Label, KnowledgeEntry]:
    table = {e.label: e for e in entries}
    if len(table) != len(entries):
        raise RuntimeError("Knowledge base has duplicate labels")
    missing = set(Label) - set(table)
    if missing:
        raise RuntimeError(f"Knowledge base is missing entries for: {sorted(m.value for m in missing)}")
    for e in entries:
        if not 0.0 <= e.confidence_ceiling <= 1.0:
            raise RuntimeError(f"{e.label.value}: confidence ceiling out of range")
        if any(a.offset <= 0.0 for a in e.alternatives):
            raise RuntimeError(f"{e.label.value}: alternative offsets must be positive")
    if table[Label.HEALTHY].alternatives:
        raise RuntimeError("healthy must not carry alternatives")
    return MappingProxyType(table)


KNOWLEDGE_BASE: Mapping[Label, KnowledgeEntry] = _build(_ENTRIES)


def lookup(label: Label) -> KnowledgeEntry:
    return KNOWLEDGE_BASE[label]


def map_to_label(detected_name: str | None) -> Label:
    """
    Map a free-text diagnosis (as returned by a remote service) onto a Label.

    Exact label values win; otherwise keyword matching, defaulting to leaf_spot.
    """
    if not detected_name:
        return Label.LEAF_SPOT

    name = str(detected_name).strip().lower()
    try:
        return Label(name.replace(" ", "_"))
    except ValueError:
        pass

    if "aphid" in name:
        return Label.APHIDS
    if "mildew" in name and "powder" in name:
        return Label.POWDERY_MILDEW
    if "spot" in name or "bacteria" in name:
        return Label.LEAF_SPOT
    if "spider" in name or "mite" in name:
        return Label.SPIDER_MITES
    if "caterpillar" in name or "larvae" in name or "worm" in name:
        return Label.CATERPILLARS
    if "rust" in name:
        return Label.RUST
    if "blight" in name and "late" in name:
        return Label.LATE_BLIGHT
    if "thrip" in name:
        return Label.THRIPS
    if "healthy" in name or "normal" in name or "good" in name:
        return Label.HEALTHY

    if "fungal" in name or "fungus" in name:
        if "white" in name or "powder" in name:
            return Label.POWDERY_MILDEW
        if "orange" in name or "brown" in name:
            return Label.RUST
        return Label.LEAF_SPOT

    if "insect" in name or "bug" in name or "pest" in name:
        if "small" in name or "green" in name:
            return Label.APHIDS
        if "web" in name or "mite" in name:
            return Label.SPIDER_MITES
        if "eat" in name or "chew" in name:
            return Label.CATERPILLARS
        return Label.THRIPS

    return Label.LEAF_SPOT
