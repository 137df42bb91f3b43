"""
ELF On-Disk Structures
=======================

Byte-exact little-endian layouts for the ELF identification block, file
header, section header and program header, in both the 32-bit (ELF32)
and 64-bit (ELF64) variants.

Every layout is a :class:`struct.Struct` with an explicit ``"<"`` byte
order, so there is no native alignment padding and the sizes match the
ELF standard exactly:

    ==================  ======  ======
    Structure           ELF32   ELF64
    ==================  ======  ======
    Identification        16      16
    File header           52      64
    Section header        40      64
    Program header        32      56
    ==================  ======  ======

Fields that the standard defines as "zero means absent" are decoded to
``None`` rather than ``0``, so a missing table can never be mistaken for
one located at byte zero.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Draft 2013.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Optional

from reindeer.core.errors import ZeroCopyError
from reindeer.core.range import Buffer


# ---------------------------------------------------------------------------
# Identification constants
# ---------------------------------------------------------------------------

ELF_MAGIC: bytes = b"\x7fELF"

ELFCLASSNONE: int = 0
ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATANONE: int = 0
ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

EV_NONE: int = 0
EV_CURRENT: int = 1

# ---------------------------------------------------------------------------
# Object file types
# ---------------------------------------------------------------------------

ET_NONE: int = 0
ET_REL: int = 1
ET_EXEC: int = 2
ET_DYN: int = 3
ET_CORE: int = 4
ET_LOPROC: int = 0xFF00
ET_HIPROC: int = 0xFFFF

_ET_NAMES: dict[int, str] = {
    ET_NONE: "NONE",
    ET_REL: "REL (Relocatable)",
    ET_EXEC: "EXEC (Executable)",
    ET_DYN: "DYN (Shared object)",
    ET_CORE: "CORE (Core dump)",
}

# ---------------------------------------------------------------------------
# Machine architectures
# ---------------------------------------------------------------------------

EM_NONE: int = 0
EM_SPARC: int = 2
EM_386: int = 3
EM_MIPS: int = 8
EM_PPC: int = 20
EM_PPC64: int = 21
EM_ARM: int = 40
EM_X86_64: int = 62
EM_AARCH64: int = 183
EM_RISCV: int = 243

_EM_NAMES: dict[int, str] = {
    EM_NONE: "None",
    EM_SPARC: "SPARC",
    EM_386: "x86",
    EM_MIPS: "MIPS",
    EM_PPC: "PowerPC",
    EM_PPC64: "PowerPC64",
    EM_ARM: "ARM",
    EM_X86_64: "x86_64",
    EM_AARCH64: "AArch64",
    EM_RISCV: "RISC-V",
}

# ---------------------------------------------------------------------------
# Section header types and flags
# ---------------------------------------------------------------------------

SHT_NULL: int = 0
SHT_PROGBITS: int = 1
SHT_SYMTAB: int = 2
SHT_STRTAB: int = 3
SHT_RELA: int = 4
SHT_HASH: int = 5
SHT_DYNAMIC: int = 6
SHT_NOTE: int = 7
SHT_NOBITS: int = 8
SHT_REL: int = 9
SHT_SHLIB: int = 10
SHT_DYNSYM: int = 11
SHT_INIT_ARRAY: int = 14
SHT_FINI_ARRAY: int = 15
SHT_GNU_HASH: int = 0x6FFFFFF6
SHT_GNU_VERNEED: int = 0x6FFFFFFE
SHT_GNU_VERSYM: int = 0x6FFFFFFF

_SHT_NAMES: dict[int, str] = {
    SHT_NULL: "NULL",
    SHT_PROGBITS: "PROGBITS",
    SHT_SYMTAB: "SYMTAB",
    SHT_STRTAB: "STRTAB",
    SHT_RELA: "RELA",
    SHT_HASH: "HASH",
    SHT_DYNAMIC: "DYNAMIC",
    SHT_NOTE: "NOTE",
    SHT_NOBITS: "NOBITS",
    SHT_REL: "REL",
    SHT_SHLIB: "SHLIB",
    SHT_DYNSYM: "DYNSYM",
    SHT_INIT_ARRAY: "INIT_ARRAY",
    SHT_FINI_ARRAY: "FINI_ARRAY",
    SHT_GNU_HASH: "GNU_HASH",
    SHT_GNU_VERNEED: "VERNEED",
    SHT_GNU_VERSYM: "VERSYM",
}

SHF_WRITE: int = 0x1
SHF_ALLOC: int = 0x2
SHF_EXECINSTR: int = 0x4

# ---------------------------------------------------------------------------
# Program header types and flags
# ---------------------------------------------------------------------------

PT_NULL: int = 0
PT_LOAD: int = 1
PT_DYNAMIC: int = 2
PT_INTERP: int = 3
PT_NOTE: int = 4
PT_SHLIB: int = 5
PT_PHDR: int = 6
PT_TLS: int = 7
# https://refspecs.linuxfoundation.org/LSB_5.0.0/LSB-Core-generic/LSB-Core-generic/progheader.html
PT_GNU_EH_FRAME: int = 0x6474E550
PT_GNU_STACK: int = 0x6474E551
PT_GNU_RELRO: int = 0x6474E552
PT_GNU_PROPERTY: int = 0x6474E553
PT_LOPROC: int = 0x70000000
PT_HIPROC: int = 0x7FFFFFFF

_PT_NAMES: dict[int, str] = {
    PT_NULL: "NULL",
    PT_LOAD: "LOAD",
    PT_DYNAMIC: "DYNAMIC",
    PT_INTERP: "INTERP",
    PT_NOTE: "NOTE",
    PT_SHLIB: "SHLIB",
    PT_PHDR: "PHDR",
    PT_TLS: "TLS",
    PT_GNU_EH_FRAME: "GNU_EH_FRAME",
    PT_GNU_STACK: "GNU_STACK",
    PT_GNU_RELRO: "GNU_RELRO",
    PT_GNU_PROPERTY: "GNU_PROPERTY",
}

PF_X: int = 0x1
PF_W: int = 0x2
PF_R: int = 0x4


# ---------------------------------------------------------------------------
# Symbolic names for open enumerations
# ---------------------------------------------------------------------------

def _name_or_hex(table: dict[int, str], value: int) -> str:
    name = table.get(value)
    return name if name is not None else f"0x{value:x}"


def file_type_name(value: int) -> str:
    """Name of an ``e_type`` value; unknown values render as hex."""
    if value in _ET_NAMES:
        return _ET_NAMES[value]
    if ET_LOPROC <= value <= ET_HIPROC:
        return f"LOPROC+0x{value - ET_LOPROC:x}"
    return f"0x{value:x}"


def machine_name(value: int) -> str:
    """Name of an ``e_machine`` value; unknown values render as hex."""
    return _name_or_hex(_EM_NAMES, value)


def section_type_name(value: int) -> str:
    """Name of an ``sh_type`` value; unknown values render as hex."""
    return _name_or_hex(_SHT_NAMES, value)


def segment_type_name(value: int) -> str:
    """Name of a ``p_type`` value; unknown values render as hex."""
    return _name_or_hex(_PT_NAMES, value)


def section_flags_str(flags: int) -> str:
    """Render ``sh_flags`` as ``W``/``A``/``X`` letters, ``-`` if none."""
    parts: list[str] = []
    if flags & SHF_WRITE:
        parts.append("W")
    if flags & SHF_ALLOC:
        parts.append("A")
    if flags & SHF_EXECINSTR:
        parts.append("X")
    return "".join(parts) if parts else "-"


def segment_flags_str(flags: int) -> str:
    """Render ``p_flags`` as ``R``/``W``/``X`` letters, ``-`` if none."""
    parts: list[str] = []
    if flags & PF_R:
        parts.append("R")
    if flags & PF_W:
        parts.append("W")
    if flags & PF_X:
        parts.append("X")
    return "".join(parts) if parts else "-"


# ---------------------------------------------------------------------------
# Fixed-size record base
# ---------------------------------------------------------------------------

class _Record:
    """Mixin for fixed-size records decoded with a :class:`struct.Struct`.

    Subclasses are slotted frozen dataclasses whose field order matches
    ``LAYOUT``.  Names listed in ``OPTIONAL`` decode a stored zero as
    ``None``.
    """

    __slots__ = ()

    LAYOUT: ClassVar[struct.Struct]
    OPTIONAL: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def size(cls) -> int:
        return cls.LAYOUT.size

    @classmethod
    def _unpack(cls, buffer: Buffer) -> tuple[Any, ...]:
        if len(buffer) < cls.LAYOUT.size:
            raise ZeroCopyError(cls.LAYOUT.size, len(buffer))
        return cls.LAYOUT.unpack_from(buffer, 0)

    @classmethod
    def from_prefix(cls, buffer: Buffer) -> Any:
        """Decode one record from the start of *buffer*.

        Trailing bytes are ignored.

        Raises:
            ZeroCopyError: If *buffer* is shorter than the record.
        """
        values = cls._unpack(buffer)
        optional = cls.OPTIONAL
        return cls(*(  # type: ignore[call-arg]
            None if f.name in optional and v == 0 else v
            for f, v in zip(fields(cls), values)  # type: ignore[arg-type]
        ))


# ---------------------------------------------------------------------------
# Identification block
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ElfIdent(_Record):
    """The 16-byte ``e_ident`` prefix shared by both header widths."""

    ei_magic: bytes
    ei_class: int
    ei_data: int
    ei_version: int
    ei_pad: bytes

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<4sBBB9s")


# ---------------------------------------------------------------------------
# File headers
# ---------------------------------------------------------------------------

_HEADER_OPTIONAL = frozenset(
    {"e_entry", "e_phoff", "e_shoff", "e_phnum", "e_shnum", "e_shstrndx"}
)


class _HeaderRecord(_Record):
    __slots__ = ()

    OPTIONAL: ClassVar[frozenset[str]] = _HEADER_OPTIONAL

    @classmethod
    def from_prefix(cls, buffer: Buffer) -> Any:
        values = list(cls._unpack(buffer))
        ident = ElfIdent.from_prefix(values[0])
        rest = (
            None if f.name in cls.OPTIONAL and v == 0 else v
            for f, v in zip(fields(cls)[1:], values[1:])  # type: ignore[arg-type]
        )
        return cls(ident, *rest)  # type: ignore[call-arg]


@dataclass(frozen=True, slots=True)
class Elf32Header(_HeaderRecord):
    e_ident: ElfIdent
    e_type: int
    e_machine: int
    e_version: int
    e_entry: Optional[int]
    e_phoff: Optional[int]
    e_shoff: Optional[int]
    e_flags: int
    e_ehsize: int
    e_phentsize: int
    e_phnum: Optional[int]
    e_shentsize: int
    e_shnum: Optional[int]
    e_shstrndx: Optional[int]

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<16sHHIIIIIHHHHHH")


@dataclass(frozen=True, slots=True)
class Elf64Header(_HeaderRecord):
    e_ident: ElfIdent
    e_type: int
    e_machine: int
    e_version: int
    e_entry: Optional[int]
    e_phoff: Optional[int]
    e_shoff: Optional[int]
    e_flags: int
    e_ehsize: int
    e_phentsize: int
    e_phnum: Optional[int]
    e_shentsize: int
    e_shnum: Optional[int]
    e_shstrndx: Optional[int]

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<16sHHIQQQIHHHHHH")


# ---------------------------------------------------------------------------
# Section headers
# ---------------------------------------------------------------------------

_SECTION_OPTIONAL = frozenset({"sh_addr", "sh_entsize"})


@dataclass(frozen=True, slots=True)
class Elf32SectionHeader(_Record):
    sh_name: int
    sh_type: int
    sh_flags: int
    sh_addr: Optional[int]
    sh_offset: int
    sh_size: int
    sh_link: int
    sh_info: int
    sh_addralign: int
    sh_entsize: Optional[int]

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIIIIIIIII")
    OPTIONAL: ClassVar[frozenset[str]] = _SECTION_OPTIONAL


@dataclass(frozen=True, slots=True)
class Elf64SectionHeader(_Record):
    sh_name: int
    sh_type: int
    sh_flags: int
    sh_addr: Optional[int]
    sh_offset: int
    sh_size: int
    sh_link: int
    sh_info: int
    sh_addralign: int
    sh_entsize: Optional[int]

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIQQQQIIQQ")
    OPTIONAL: ClassVar[frozenset[str]] = _SECTION_OPTIONAL


# ---------------------------------------------------------------------------
# Program headers
# ---------------------------------------------------------------------------

_SEGMENT_OPTIONAL = frozenset({"p_filesz", "p_memsz"})


@dataclass(frozen=True, slots=True)
class Elf32ProgramHeader(_Record):
    p_type: int
    p_offset: int
    p_vaddr: int
    p_paddr: int
    p_filesz: Optional[int]
    p_memsz: Optional[int]
    p_flags: int
    p_align: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIIIIIII")
    OPTIONAL: ClassVar[frozenset[str]] = _SEGMENT_OPTIONAL


@dataclass(frozen=True, slots=True)
class Elf64ProgramHeader(_Record):
    # p_flags sits right after p_type in the 64-bit layout.
    p_type: int
    p_flags: int
    p_offset: int
    p_vaddr: int
    p_paddr: int
    p_filesz: Optional[int]
    p_memsz: Optional[int]
    p_align: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIQQQQQQ")
    OPTIONAL: ClassVar[frozenset[str]] = _SEGMENT_OPTIONAL
