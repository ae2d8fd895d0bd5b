from __future__ import annotations

import re
from types import MappingProxyType

_JOURNAL_PUNCT_RE = re.compile(r"[.,;:!?'\"()\[\]{}]")
_JOURNAL_SPACE_RE = re.compile(r"\s+")
_ABBREVIATION_NORMALIZE_RE = re.compile(r"[.\s\-_/]+")

# (names, abbreviations)
_JOURNAL_ENTRIES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("Physical Review Letters", "Phys. Rev. Lett.", "Phys Rev Lett"), ("PRL",)),
    (("Physical Review D", "Phys. Rev. D", "Phys Rev D", "Physical Review D Particles Fields"), ("PRD",)),
    (("Physical Review A", "Phys. Rev. A", "Phys Rev A"), ("PRA",)),
    (("Physical Review B", "Phys. Rev. B", "Phys Rev B"), ("PRB",)),
    (("Physical Review C", "Phys. Rev. C", "Phys Rev C"), ("PRC",)),
    (("Physical Review E", "Phys. Rev. E", "Phys Rev E"), ("PRE",)),
    (("Physical Review X", "Phys. Rev. X", "Phys Rev X"), ("PRX",)),
    (("Physical Review Applied", "Phys. Rev. Applied"), ("PRApplied",)),
    (("Physical Review Accelerators and Beams", "Phys. Rev. Accel. Beams"), ("PRAB",)),
    (("Physical Review Physics Education Research", "Phys. Rev. Phys. Educ. Res."), ("PRPER",)),
    (("Physical Review Research", "Phys. Rev. Res."), ("PRResearch", "PRR")),
    (("Physical Review Materials", "Phys. Rev. Mater."), ("PRMaterials", "PRM")),
    (("Physical Review Fluids", "Phys. Rev. Fluids"), ("PRFluids", "PRF")),
    (("Nature",), ("Nature",)),
    (("Nature Physics", "Nat. Phys.", "Nat Phys"), ("NP", "NatPhys")),
    (("Nature Communications", "Nat. Commun.", "Nat Commun."), ("NC", "NatComm")),
    (("Nature Materials", "Nat. Mater.", "Nat Mater"), ("NatMat",)),
    (("Nature Nanotechnology", "Nat. Nanotechnol.", "Nat Nanotechnol."), ("NatNano",)),
    (("Nature Photonics", "Nat. Photon.", "Nat Photon"), ("NatPhoton",)),
    (("Nature Chemistry", "Nat. Chem.", "Nat Chem"), ("NatChem",)),
    (("Science",), ("Science",)),
    (("Science Advances", "Sci. Adv.", "Sci Adv"), ("SciAdv",)),
    (("Science Bulletin", "Sci. Bull.", "Sci Bull", "科学通报"), ("SciBull", "SB")),
    (("Journal of High Energy Physics", "J. High Energy Phys.", "JHEP"), ("JHEP",)),
    (("Nuclear Physics B", "Nucl. Phys. B"), ("NPB",)),
    (("Nuclear Physics A", "Nucl. Phys. A"), ("NPA",)),
    (("Physics Letters B", "Phys. Lett. B"), ("PLB",)),
    (("Physics Letters A", "Phys. Lett. A"), ("PLA",)),
    (("European Physical Journal C", "Eur. Phys. J. C"), ("EPJC",)),
    (("European Physical Journal A", "Eur. Phys. J. A"), ("EPJA",)),
    (("European Physical Journal B", "Eur. Phys. J. B"), ("EPJB",)),
    (("Classical and Quantum Gravity", "Class. Quantum Grav."), ("CQG",)),
    (("Reviews of Modern Physics", "Rev. Mod. Phys."), ("RMP",)),
    (("Progress of Theoretical Physics", "Prog. Theor. Phys."), ("PTP",)),
    (("Physics Reports", "Phys. Rep."), ("PhysRep",)),
    (("International Journal of Modern Physics A", "Int. J. Mod. Phys. A"), ("IJMPA",)),
    (("International Journal of Modern Physics D", "Int. J. Mod. Phys. D"), ("IJMPD",)),
    (("International Journal of Modern Physics E", "Int. J. Mod. Phys. E"), ("IJMPE",)),
    (("Modern Physics Letters A", "Mod. Phys. Lett. A"), ("MPLA",)),
    (("Chinese Physics C", "Chin. Phys. C"), ("CPC",)),
    (("Chinese Physics Letters", "Chin. Phys. Lett."), ("CPL",)),
    (("Chinese Physics B", "Chin. Phys. B"), ("CPB",)),
    (("Chinese Physics A", "Chin. Phys. A"), ("CPA",)),
    (("Chinese Journal of Physics", "Chin. J. Phys."), ("CJP",)),
    (("Communications in Theoretical Physics", "Commun. Theor. Phys."), ("CTP",)),
    (("Acta Physica Sinica", "Acta Phys. Sin.", "物理学报"), ("APS",)),
    (("Chinese Journal of Chemical Physics", "Chin. J. Chem. Phys.", "化学物理学报"), ("CJCP",)),
    (("High Energy Physics and Nuclear Physics", "High Energy Phys. Nucl. Phys.", "高能物理与核物理"), ("HEPNP",)),
    (("Nuclear Science and Techniques", "Nucl. Sci. Tech.", "核技术"), ("NST",)),
    (
        (
            "Science China Physics Mechanics and Astronomy",
            "Sci. China Phys. Mech. Astron.",
            "中国科学物理学力学天文学",
            "中国科学 物理学 力学 天文学",
        ),
        ("SCPMA",),
    ),
    (("Journal of Physics G", "J. Phys. G"), ("JPhysG", "JPG")),
    (("New Journal of Physics", "New J. Phys."), ("NJP",)),
    (("Journal of Cosmology and Astroparticle Physics", "J. Cosmol. Astropart. Phys."), ("JCAP",)),
    (
        ("Annual Review of Nuclear and Particle Science", "Annu. Rev. Nucl. Part. Sci.", "Ann. Rev. Nucl. Part. Sci."),
        ("ARNPS",),
    ),
    (("Annals of Physics", "Ann. Phys.", "Ann Phys"), ("AnnPhys",)),
    (("Reports on Progress in Physics", "Rep. Prog. Phys.", "Rept. Prog. Phys."), ("RPP",)),
    (("Fortschritte der Physik", "Fortsch. Phys.", "Fortschr. Phys."), ("FortschPhys",)),
    (
        (
            "Nuclear Instruments and Methods in Physics Research Section A",
            "Nucl. Instrum. Methods Phys. Res. A",
            "Nucl. Instrum. Meth. A",
            "NIM A",
        ),
        ("NIMA",),
    ),
    (
        (
            "Nuclear Instruments and Methods in Physics Research Section B",
            "Nucl. Instrum. Methods Phys. Res. B",
            "Nucl. Instrum. Meth. B",
            "NIM B",
        ),
        ("NIMB",),
    ),
    (("Physical Review", "Phys. Rev."), ("PR",)),
    (("Progress of Theoretical and Experimental Physics", "Prog. Theor. Exp. Phys.", "PTEP"), ("PTEP",)),
    (("Zeitschrift für Physik C", "Z. Phys. C", "Zeit. Phys. C"), ("ZPC",)),
    (("Zeitschrift für Physik A", "Z. Phys. A", "Zeit. Phys. A"), ("ZPA",)),
    (("Il Nuovo Cimento A", "Nuovo Cimento A", "Nuovo Cim. A"), ("NCA",)),
    (("Il Nuovo Cimento B", "Nuovo Cimento B", "Nuovo Cim. B"), ("NCB",)),
    (("Communications in Mathematical Physics", "Commun. Math. Phys."), ("CMP",)),
    (("Living Reviews in Relativity", "Living Rev. Relativ.", "Living Rev. Rel."), ("LRR",)),
    (("Astrophysical Journal", "Astrophys. J."), ("ApJ",)),
    (("Astrophysical Journal Letters", "Astrophys. J. Lett."), ("ApJL",)),
    (("Monthly Notices of the Royal Astronomical Society", "Mon. Not. Roy. Astron. Soc."), ("MNRAS",)),
    (("Astronomy and Astrophysics", "Astron. Astrophys."), ("AA",)),
    (("Computer Physics Communications", "Comput. Phys. Commun."), ("CPC_Comp",)),
    (("Few-Body Systems", "Few Body Syst."), ("FBS",)),
    (("Physics of the Dark Universe", "Phys. Dark Univ."), ("PDU",)),
)


def normalize_journal_name(name: str | None) -> str:
    if not name:
        return ""
    lowered = _JOURNAL_PUNCT_RE.sub("", name.lower())
    return _JOURNAL_SPACE_RE.sub(" ", lowered).strip()


def _normalize_abbreviation(value: str | None) -> str:
    if not value:
        return ""
    return _ABBREVIATION_NORMALIZE_RE.sub("", value.lower())


def _build_tables() -> tuple[dict[str, tuple[str, ...]], dict[str, tuple[str, ...]]]:
    abbreviations_by_name: dict[str, tuple[str, ...]] = {}
    names_by_abbreviation: dict[str, list[str]] = {}
    for names, abbreviations in _JOURNAL_ENTRIES:
        unique_abbreviations = tuple(dict.fromkeys(a for a in abbreviations if a))
        if not unique_abbreviations:
            continue
        for name in names:
            normalized_name = normalize_journal_name(name)
            if not normalized_name:
                continue
            abbreviations_by_name[normalized_name] = unique_abbreviations
            for abbr in unique_abbreviations:
                normalized_abbr = _normalize_abbreviation(abbr)
                if not normalized_abbr:
                    continue
                bucket = names_by_abbreviation.setdefault(normalized_abbr, [])
                if name not in bucket:
                    bucket.append(name)
    return abbreviations_by_name, {k: tuple(v) for k, v in names_by_abbreviation.items()}


_ABBREVIATIONS_BY_NAME, _FULL_NAMES_BY_ABBREVIATION = _build_tables()
JOURNAL_ABBREVIATIONS = MappingProxyType(_ABBREVIATIONS_BY_NAME)
JOURNAL_FULL_NAMES = MappingProxyType(_FULL_NAMES_BY_ABBREVIATION)


def get_journal_abbreviations(journal_name: str | None) -> tuple[str, ...]:
    normalized = normalize_journal_name(journal_name)
    if not normalized:
        return ()
    return JOURNAL_ABBREVIATIONS.get(normalized, ())


def get_journal_full_names(abbreviation: str | None) -> tuple[str, ...]:
    normalized = _normalize_abbreviation(abbreviation)
    if not normalized:
        return ()
    return JOURNAL_FULL_NAMES.get(normalized, ())
