#!/usr/bin/env python3
"""Phrase lexicon for question intent and date detection.

Every entry is written in normalized form (lowercase, no diacritics, single
spaces) so it can be looked up directly against a normalized question.
"""

from __future__ import annotations


LAST_YEAR_PHRASES: set[str] = {
    "last year",
    "past year",
    "previous year",
    "ano pasado",
    "el ano anterior",
}

THIS_YEAR_PHRASES: set[str] = {
    "this year",
    "current year",
    "este ano",
    "ano actual",
}

THIS_MONTH_PHRASES: set[str] = {
    "this month",
    "current month",
    "este mes",
    "mes actual",
}

LAST_MARKERS: set[str] = {
    "last",
    "latest",
    "past",
    "ultima",
    "ultimas",
    "pasada",
    "pasadas",
}

WEEK_MARKERS: set[str] = {
    "week",
    "weeks",
    "semana",
    "semanas",
}

WHICH_TREES_PHRASES: set[str] = {
    "which trees",
    "what trees",
    "which tree",
    "what tree",
    "what kind of trees",
    "que arboles",
    "cuales arboles",
    "que arbol",
    "cuales son los arboles",
    "que tipo de arboles",
}

HOW_MANY_PHRASES: set[str] = {
    "how many",
    "how much",
    "cuantos",
    "cuantas",
    "cuanto",
    "cuanta",
}

HOW_MANY_TIMES_PHRASES: set[str] = {
    "how many times",
    "how often",
    "cuantas veces",
    "cuantas ocasiones",
    "con que frecuencia",
}

LAST_TIME_PHRASES: set[str] = {
    "last time",
    "most recent time",
    "ultima vez",
}

TREE_WORDS: set[str] = {
    "tree",
    "trees",
    "arbol",
    "arboles",
    "arbolito",
    "arbolitos",
}

PLANT_WORDS: set[str] = {
    "plant",
    "plants",
    "seedling",
    "seedlings",
    "planta",
    "plantas",
    "plantita",
    "plantitas",
    "plantula",
    "plantulas",
    "mata",
    "matas",
}

# Connectors for "tree ... of <species>" in both languages.
SPECIES_CONNECTORS: set[str] = {"of", "de", "del"}
