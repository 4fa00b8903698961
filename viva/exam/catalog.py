"""Static vertex catalog.

Vertices are listed in curated default priority. Body weights bias the
queue order when a single credentialing body is targeted; vertices without
an explicit weight count as 1.0.
"""

from __future__ import annotations

import typing as t

from viva.model import TargetBody, VertexDefinition

PHYSIOLOGY: t.Final[str] = "Physiology"
PHARMACOLOGY: t.Final[str] = "Pharmacology"
MEASUREMENT: t.Final[str] = "Measurement/Physics"
ANATOMY: t.Final[str] = "Anatomy"

DOMAINS: t.Final[tuple[str, ...]] = (PHYSIOLOGY, PHARMACOLOGY, MEASUREMENT, ANATOMY)


def _vertex(
    name: str,
    description: str,
    domains: t.Iterable[str],
    sub_topics: t.Iterable[str],
    *,
    cicm: float | None = None,
    anzca: float | None = None,
) -> VertexDefinition:
    weights: dict[TargetBody, float] = {}
    if cicm is not None:
        weights[TargetBody.CICM] = cicm
    if anzca is not None:
        weights[TargetBody.ANZCA] = anzca
    return VertexDefinition(
        name=name,
        description=description,
        domains=frozenset(domains),
        sub_topics=tuple(sub_topics),
        weights=weights,
    )


CATALOG: t.Final[tuple[VertexDefinition, ...]] = (
    _vertex(
        "Flow=ΔP/R",
        "Ohmic flow: systemic/pulmonary/cerebral/renal circulation, airway resistance, breathing circuits",
        [PHYSIOLOGY, MEASUREMENT],
        [
            "Systemic circulation",
            "Coronary flow",
            "Cerebral autoregulation",
            "Pulmonary circulation",
            "Airway resistance",
            "Work of breathing",
            "Renal blood flow",
            "CBF regulation",
        ],
        cicm=1.2,
        anzca=1.0,
    ),
    _vertex(
        "τ=V/Q",
        "Time constant: lung washout/washin, regional time constants, elimination kinetics, FA/FI curves",
        [PHYSIOLOGY, PHARMACOLOGY],
        [
            "Lung washout/washin",
            "Time constants (regional)",
            "Elimination kinetics",
            "Monitor response time",
            "Volatile FA/FI curves",
            "CSHT",
        ],
        cicm=1.0,
        anzca=1.2,
    ),
    _vertex(
        "Fick",
        "Fick principle: CO measurement, O2 delivery/consumption, gas exchange, RPF measurement",
        [PHYSIOLOGY],
        ["CO measurement", "O2 delivery/consumption", "Gas exchange/VO2", "RPF measurement (PAH)"],
        cicm=1.2,
        anzca=0.8,
    ),
    _vertex(
        "Hill",
        "Hill equation: dose-response, receptor occupancy, O2-Hb dissociation, synaptic kinetics, force-Ca2+",
        [PHYSIOLOGY, PHARMACOLOGY],
        [
            "Potency/efficacy/TI",
            "Receptor occupancy theory",
            "O2-Hb dissociation curve",
            "Synaptic receptor kinetics",
            "Force-Ca2+ relationship",
            "Synergism/antagonism",
        ],
        cicm=1.0,
        anzca=1.0,
    ),
    _vertex(
        "Starling",
        "Starling forces: capillary dynamics, glomerular filtration, Frank-Starling cardiac mechanics",
        [PHYSIOLOGY],
        ["Capillary dynamics", "Glomerular filtration", "Cardiac mechanics (Frank-Starling)", "Oedema formation"],
        cicm=1.2,
        anzca=0.8,
    ),
    _vertex(
        "Cl=E×Q",
        "Clearance: hepatic/renal drug clearance, extraction ratio, protein binding",
        [PHARMACOLOGY],
        [
            "Hepatic clearance",
            "Renal clearance (drugs)",
            "Extraction ratio",
            "Protein binding displacement",
            "Enzyme induction/inhibition",
        ],
        cicm=1.0,
        anzca=1.2,
    ),
    _vertex(
        "Nernst",
        "Nernst equation: resting membrane potential, action potential, cardiac AP, NMJ, tubular transport, "
        "Na+ channel block",
        [PHYSIOLOGY, PHARMACOLOGY],
        [
            "Resting membrane potential",
            "Action potential phases (GHK)",
            "Cardiac AP",
            "NMJ/motor endplate",
            "Tubular transport potentials",
            "Na+ channel block (LA)",
        ],
        cicm=0.8,
        anzca=1.2,
    ),
    _vertex(
        "Laplace",
        "Laplace law: alveolar mechanics, ventricular wall stress, surfactant, bubble/cuff physics",
        [PHYSIOLOGY, MEASUREMENT],
        ["Alveolar mechanics/surfactant", "Ventricular wall stress", "Bubble/cuff physics", "Wall tension (cardiac)"],
        cicm=1.0,
        anzca=1.0,
    ),
    _vertex(
        "Henderson-Hasselbalch",
        "Acid-base: respiratory and renal components, pH-trapping",
        [PHYSIOLOGY],
        ["Respiratory acid-base", "Renal acid-base", "pH-trapping", "Buffer systems"],
    ),
    _vertex(
        "Michaelis-Menten",
        "Zero-order kinetics, saturation, enzyme kinetics",
        [PHARMACOLOGY],
        ["Zero-order kinetics", "Enzyme saturation", "Vmax and Km", "Alcohol metabolism"],
    ),
    _vertex(
        "Beer-Lambert",
        "Pulse oximetry, co-oximetry, spectrophotometry",
        [MEASUREMENT],
        ["Pulse oximetry", "Co-oximetry", "Spectrophotometry", "Isobestic points"],
    ),
)

_by_name: t.Final[dict[str, VertexDefinition]] = {v.name: v for v in CATALOG}


def get_definition(name: str) -> VertexDefinition | None:
    return _by_name.get(name)
