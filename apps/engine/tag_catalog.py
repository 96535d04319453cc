#!/usr/bin/env python3
"""Tag catalog for garden log classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Language = Literal["en", "es"]
LANGUAGES: tuple[Language, ...] = ("en", "es")
DEFAULT_LANGUAGE: Language = "en"


@dataclass(frozen=True)
class TagDefinition:
    id: str
    english: str
    spanish: str
    keywords: tuple[str, ...]

    def localized_name(self, language: Language) -> str:
        return self.spanish if language == "es" else self.english


def _tag(tag_id: str, english: str, spanish: str, *keywords: str) -> TagDefinition:
    return TagDefinition(id=tag_id, english=english, spanish=spanish, keywords=keywords)


TAG_CATALOG: tuple[TagDefinition, ...] = (
    _tag(
        "siembra",
        "Planting",
        "Siembra",
        "siembra",
        "sembr",
        "plantar",
        "plante",
        "planto",
        "plantado",
        "seed",
        "sow",
        "sowing",
    ),
    _tag("cosecha", "Harvest", "Cosecha", "cosecha", "cosechar", "recolect", "harvest", "collect"),
    _tag("poda", "Pruning", "Poda", "poda", "podar", "pode", "prune", "pruning"),
    _tag("riego", "Irrigation", "Riego", "riego", "regar", "agua", "irrigation", "water", "watering"),
    _tag("abono", "Fertilizer", "Abono", "abono", "abonar", "fertiliz", "compost", "fertilizer", "manure"),
    _tag("trasplante", "Transplant", "Trasplante", "trasplante", "trasplant", "transplant"),
    _tag(
        "plagas",
        "Pest Control",
        "Plagas",
        "plaga",
        "plagas",
        "insecto",
        "insectos",
        "hormiga",
        "hormigas",
        "pest",
        "insect",
        "aphid",
        "ant",
    ),
    _tag(
        "maleza",
        "Weeding",
        "Maleza",
        "maleza",
        "malezas",
        "hierba",
        "hierbas",
        "deshierbe",
        "weed",
        "weeding",
    ),
    _tag("suelo", "Soil", "Suelo", "suelo", "tierra", "terreno", "soil", "ground"),
    _tag("semillas", "Seeds", "Semillas", "semilla", "semillas", "seed", "seeds"),
    _tag("injerto", "Grafting", "Injerto", "injerto", "injert", "graft", "grafting"),
    _tag("limpieza", "Cleaning", "Limpieza", "limpieza", "limpiar", "cleanup", "cleaning"),
    _tag("arbol", "Tree", "Árbol", "arbol", "tree"),
    _tag("frutal", "Fruit Tree", "Frutal", "frutal", "fruit tree", "orchard"),
    _tag("limon", "Lemon", "Limón", "limon", "lemon", "citron"),
    _tag("naranja", "Orange", "Naranja", "naranja", "orange"),
    _tag("manzana", "Apple", "Manzana", "manzana", "apple"),
    _tag("cedro", "Cedar", "Cedro", "cedro", "cedar"),
    _tag("papa", "Potato", "Papa", "papa", "patata", "potato"),
    _tag("zanahoria", "Carrot", "Zanahoria", "zanahoria", "carrot"),
    _tag("cebolla", "Onion", "Cebolla", "cebolla", "onion"),
    _tag("ajo", "Garlic", "Ajo", "ajo", "garlic"),
    _tag("lechuga", "Lettuce", "Lechuga", "lechuga", "lettuce"),
    _tag("espinaca", "Spinach", "Espinaca", "espinaca", "spinach"),
    _tag("culantro", "Cilantro", "Culantro", "culantro", "cilantro", "coriander"),
    _tag("maiz", "Corn", "Maíz", "maiz", "corn"),
    _tag("frijol", "Beans", "Frijol", "frijol", "frijoles", "bean", "beans"),
    _tag("estanque", "Pond", "Estanque", "estanque", "pond"),
    _tag("raiz", "Root", "Raíz", "raiz", "root", "tuberculo", "tubercle", "bulbo", "bulb"),
)


TREE_TAG_ID = "arbol"

# Species names used by the tree listing and counting questions.
TREE_SPECIES_IDS: frozenset[str] = frozenset({"limon", "naranja", "manzana", "cedro"})
