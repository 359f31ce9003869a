"""Default vocabulary for the tag engine.

The study companion is German-first and started out with computer
engineering courses, which is where the synonym groups and canonical topics
below come from. Both tables can be replaced with JSON files, see
`load_known_synonyms` and `load_canonical_topics`.
"""
from __future__ import annotations

import json
from pathlib import Path

from study_companion.utils.logging import get_logger

logger = get_logger(__name__)

STOP_WORDS: frozenset[str] = frozenset({
    # German articles
    "der", "die", "das", "den", "dem", "des",
    "ein", "eine", "einer", "einem", "einen", "eines",
    # German prepositions
    "mit", "von", "zu", "bei", "nach", "für", "über", "unter", "zwischen",
    "in", "an", "auf", "aus", "vor", "hinter", "neben",
    # English articles and prepositions
    "the", "a", "an", "of", "to", "in", "for", "on", "with", "at", "by", "from",
    # Conjunctions
    "und", "oder", "and", "or",
})

# primary token -> variant tokens
KNOWN_SYNONYMS: dict[str, list[str]] = {
    "quinemccluskey": ["quine", "mccluskey", "qmc"],
    "kvdiagramm": ["karnaugh", "veitch", "kmap", "kvmap"],
    "wahrheitstabelle": ["wahrheitstafel", "truthtable"],
    "booleschealgebra": ["boolean", "boolesch", "boolsche"],
    "minimierung": ["minimieren", "vereinfachung", "vereinfachen", "simplification"],
    "zahlensystem": ["zahlensysteme", "numbersystem", "numbersystems"],
    "zweierkomplement": ["twoscomplement", "2komplement", "2skomplement"],
    "automat": ["automaten", "automaton", "automata", "statemachine"],
    "deterministic": ["deterministisch", "dfa", "dea"],
    "nondeterministic": ["nichtdeterministisch", "nfa", "nea"],
    "regulaererausdruck": ["regex", "regexp", "regularexpression", "regulaereausdruecke"],
}

# canonical topic key -> [preferred display label, *aliases]
CANONICAL_TOPICS: dict[str, list[str]] = {
    # Boolean algebra and logic
    "boolesche-algebra": [
        "Boolesche Algebra",
        "boolsche algebra", "boolean algebra", "boolesche logik", "boolsche logik",
        "schaltalgebra", "switching algebra",
    ],
    "wahrheitstabelle": [
        "Wahrheitstabelle",
        "wahrheitstafel", "truth table", "funktionstabelle", "wahrheits-tabelle",
    ],
    "kv-diagramm": [
        "KV-Diagramm",
        "karnaugh-veitch", "karnaugh veitch", "karnaugh", "kv map", "kvmap", "k-map",
        "kmap", "kv - diagramm", "kvdiagramm", "karnaugh-diagramm", "veitch-diagramm",
    ],
    "quine-mccluskey": [
        "Quine-McCluskey",
        "quine mccluskey", "quinemccluskey", "qmc", "quine-mc-cluskey", "mccluskey",
        "tabellenverfahren", "quine-mccluskey-verfahren", "quine-mccluskey verfahren",
    ],
    "minimierung": [
        "Minimierung",
        "vereinfachung", "minimieren", "simplification", "reduktion", "optimierung",
        "funktionsminimierung", "schaltungsminimierung",
    ],
    "primimplikanten": [
        "Primimplikanten",
        "primimplikant", "prime implicants", "kernimplikanten", "wesentliche primimplikanten",
    ],
    # Number systems
    "zahlensysteme": [
        "Zahlensysteme",
        "zahlensystem", "number systems", "stellenwertsysteme", "positionssysteme",
    ],
    "binaersystem": [
        "Binärsystem",
        "binär", "binary", "dualsystem", "zweier-system", "basis-2",
    ],
    "hexadezimal": [
        "Hexadezimalsystem",
        "hex", "hexadezimal", "hexadecimal", "basis-16", "sechzehnersystem",
    ],
    "oktal": [
        "Oktalsystem",
        "octal", "basis-8", "achtersystem",
    ],
    "bcd": [
        "BCD-Code",
        "binary coded decimal", "bcd code", "8421-code", "bcd",
    ],
    "zweierkomplement": [
        "Zweierkomplement",
        "twos complement", "2er komplement", "2er-komplement", "zweier komplement",
        "twos-complement", "vorzeichendarstellung",
    ],
    "einerkomplement": [
        "Einerkomplement",
        "ones complement", "1er komplement", "einer komplement",
    ],
    "gleitkommazahl": [
        "Gleitkommazahlen",
        "floating point", "fließkomma", "gleitkomma", "floating-point",
        "ieee754", "ieee 754", "ieee-754",
    ],
    "festkommazahl": [
        "Festkommazahlen",
        "fixed point", "festkomma", "fixed-point",
    ],
    # Digital logic
    "gatter": [
        "Logikgatter",
        "gates", "logic gates", "schaltgatter", "grundgatter",
        "and", "or", "not", "nand", "nor", "xor", "xnor",
    ],
    "schaltnetze": [
        "Schaltnetze",
        "schaltnetz", "combinational circuits", "kombinatorische schaltungen",
        "kombinatorik", "kombinationsschaltung",
    ],
    "schaltwerke": [
        "Schaltwerke",
        "schaltwerk", "sequential circuits", "sequentielle schaltungen",
        "zustandsautomaten",
    ],
    "flipflop": [
        "Flipflops",
        "flip-flop", "flip flop", "speicherglieder", "bistabile kippstufe",
        "rs-flipflop", "jk-flipflop", "d-flipflop", "t-flipflop",
    ],
    "multiplexer": [
        "Multiplexer",
        "mux", "datenselektor", "multiplexing",
    ],
    "demultiplexer": [
        "Demultiplexer",
        "demux", "datenverteiler", "demultiplexing",
    ],
    "addierer": [
        "Addierer",
        "adder", "halbaddierer", "volladdierer", "carry-lookahead",
        "ripple carry", "half adder", "full adder",
    ],
    "komparator": [
        "Komparator",
        "comparator", "vergleicher", "größenvergleich",
    ],
    # Automata theory
    "automat": [
        "Automaten",
        "automaton", "automata", "zustandsmaschine", "state machine",
        "endlicher automat", "finite automaton", "fsm",
    ],
    "dea": [
        "DEA",
        "dfa", "deterministischer automat", "deterministic finite automaton",
        "deterministisch endlicher automat",
    ],
    "nea": [
        "NEA",
        "nfa", "nichtdeterministischer automat", "non-deterministic finite automaton",
        "nichtdeterministisch endlicher automat",
    ],
    "zustandsdiagramm": [
        "Zustandsdiagramm",
        "state diagram", "zustandsgraph", "automatengraph", "übergangsgraph",
    ],
    "zustandstabelle": [
        "Zustandstabelle",
        "state table", "übergangstabelle", "transition table",
    ],
    "regulaere-ausdruecke": [
        "Reguläre Ausdrücke",
        "regex", "regexp", "regular expressions", "regulärer ausdruck",
    ],
    # Computer architecture
    "alu": [
        "ALU",
        "arithmetic logic unit", "arithmetisch-logische einheit", "rechenwerk",
    ],
    "register": [
        "Register",
        "registers", "registerbank", "speicherregister", "schieberegister",
    ],
    "speicher": [
        "Speicher",
        "memory", "ram", "rom", "cache", "speicherarchitektur",
        "hauptspeicher", "arbeitsspeicher",
    ],
    "bus": [
        "Bus-Systeme",
        "bus", "datenbus", "adressbus", "steuerbus", "systembus",
    ],
    "cpu": [
        "CPU",
        "processor", "prozessor", "central processing unit", "rechenwerk",
        "steuerwerk", "leitwerk",
    ],
    # Encoding
    "fehlerkorrektur": [
        "Fehlerkorrektur",
        "error correction", "ecc", "fehlerkorrekturcode", "fehlererkennung",
    ],
    "hamming": [
        "Hamming-Code",
        "hamming", "hamming code", "hamming-distanz", "hamming distance",
    ],
    "parity": [
        "Parität",
        "parity", "paritätsbit", "gerade parität", "ungerade parität",
    ],
    # Misc
    "horner-schema": [
        "Horner-Schema",
        "horner", "horner schema", "hornerschema", "horner-verfahren",
    ],
    "assembler": [
        "Assembler",
        "assembly", "maschinensprache", "maschinenprogrammierung",
    ],
    "mikroprogrammierung": [
        "Mikroprogrammierung",
        "microcode", "mikroprogramm", "mikrobefehl",
    ],
}

NOISE_TOPICS: frozenset[str] = frozenset({
    "aufgaben", "aufgabe", "übungen", "übung", "exercises", "exercise",
    "keine zusammenfassung", "keine zusammenfassung mehr möglich",
    "allgemein", "general", "sonstiges", "misc", "miscellaneous",
    "einleitung", "einführung", "introduction", "intro",
    "zusammenfassung", "summary", "fazit", "conclusion",
    "anhang", "appendix", "literatur", "quellen", "references",
    "seite", "page", "kapitel", "chapter", "abschnitt", "section",
})


def _load_mapping(path: str | Path) -> dict[str, list[str]]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    mapping: dict[str, list[str]] = {}
    for key, values in raw.items():
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValueError(f"Expected a list of strings for {key!r} in {path}")
        mapping[str(key)] = list(values)
    return mapping


def load_known_synonyms(path: str | Path | None = None) -> dict[str, list[str]]:
    """Return the synonym table from `path`, or the built-in default."""
    if path is None:
        return {k: list(v) for k, v in KNOWN_SYNONYMS.items()}
    mapping = _load_mapping(path)
    logger.info("Loaded %d synonym groups from %s", len(mapping), path)
    return mapping


def load_canonical_topics(path: str | Path | None = None) -> dict[str, list[str]]:
    """Return the canonical topic map from `path`, or the built-in default.

    Every value must start with the preferred display label.
    """
    if path is None:
        return {k: list(v) for k, v in CANONICAL_TOPICS.items()}
    mapping = _load_mapping(path)
    empty = [k for k, v in mapping.items() if not v]
    if empty:
        raise ValueError(f"Canonical topics without display label in {path}: {', '.join(empty)}")
    logger.info("Loaded %d canonical topics from %s", len(mapping), path)
    return mapping
