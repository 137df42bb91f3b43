"""Tests for ElfHeader validation, accessors and table locations."""

import pytest

from reindeer.core.errors import (
    ElfError,
    IdentificationError,
    InvalidClass,
    InvalidDataEncoding,
    InvalidMagic,
    InvalidVersion,
    ZeroCopyError,
)
from reindeer.core.header import ElfHeader
from reindeer.core.range import U64_MAX, ByteRange
from reindeer.core.structures import Elf32Header, Elf64Header

from tests.builders import elf_header


class TestIdentification:
    def test_valid_elf64(self):
        header = ElfHeader.parse(elf_header(64))
        assert header.is_64bit
        assert header.width == 64
        assert isinstance(header.raw, Elf64Header)
        assert len(header.view) == 64

    def test_valid_elf32(self):
        header = ElfHeader.parse(elf_header(32))
        assert not header.is_64bit
        assert header.width == 32
        assert isinstance(header.raw, Elf32Header)
        assert len(header.view) == 52

    @pytest.mark.parametrize("position", range(4))
    def test_any_magic_byte_mutation_is_rejected(self, position):
        magic = bytearray(b"\x7fELF")
        magic[position] ^= 0xFF
        with pytest.raises(InvalidMagic) as info:
            ElfHeader.parse(elf_header(64, magic=bytes(magic)))
        assert info.value.found == bytes(magic)

    @pytest.mark.parametrize("encoding", [0, 2, 3])
    def test_non_little_endian_is_rejected(self, encoding):
        with pytest.raises(InvalidDataEncoding) as info:
            ElfHeader.parse(elf_header(64, ei_data=encoding))
        assert info.value.found == encoding

    @pytest.mark.parametrize("version", [0, 2])
    def test_bad_ident_version(self, version):
        with pytest.raises(InvalidVersion):
            ElfHeader.parse(elf_header(64, ei_version=version))

    @pytest.mark.parametrize("ei_class", [0, 3, 0xFF])
    def test_bad_class(self, ei_class):
        with pytest.raises(InvalidClass) as info:
            ElfHeader.parse(elf_header(64, ei_class=ei_class))
        assert info.value.found == ei_class

    def test_checks_run_in_order(self):
        # Bad magic wins over a big-endian encoding and a bad class.
        data = elf_header(64, magic=b"\x7fELX", ei_data=2, ei_class=9)
        with pytest.raises(InvalidMagic):
            ElfHeader.parse(data)
        # Encoding wins over version and class.
        with pytest.raises(InvalidDataEncoding):
            ElfHeader.parse(elf_header(64, ei_data=2, ei_version=0, ei_class=9))
        # Version wins over class.
        with pytest.raises(InvalidVersion):
            ElfHeader.parse(elf_header(64, ei_version=0, ei_class=9))

    def test_errors_share_a_base(self):
        with pytest.raises(IdentificationError):
            ElfHeader.parse(elf_header(64, ei_data=2))
        with pytest.raises(ElfError):
            ElfHeader.parse(elf_header(64, ei_data=2))


class TestShortBuffers:
    def test_shorter_than_ident(self):
        with pytest.raises(ZeroCopyError) as info:
            ElfHeader.parse(b"\x7fELF\x02\x01")
        assert info.value.needed == 16
        assert info.value.available == 6

    def test_elf64_truncated_header(self):
        with pytest.raises(ZeroCopyError):
            ElfHeader.parse(elf_header(64)[:63])

    def test_elf32_exact_size(self):
        data = elf_header(32)
        assert len(data) == 52
        ElfHeader.parse(data)
        with pytest.raises(ZeroCopyError):
            ElfHeader.parse(data[:51])

    def test_empty_buffer(self):
        with pytest.raises(ZeroCopyError):
            ElfHeader.parse(b"")

    def test_trailing_bytes_are_ignored(self):
        header = ElfHeader.parse(elf_header(64) + b"\xAA" * 100)
        assert len(header.view) == 64


class TestAccessors:
    def test_elf64_round_trip(self):
        header = ElfHeader.parse(
            elf_header(
                64,
                e_type=3,
                e_machine=183,
                e_entry=0xFFFF_FFFF_0000_1000,
                e_phoff=0x40,
                e_shoff=0x1_0000_0000,
                e_flags=0x5000000,
                e_phnum=13,
                e_shnum=31,
                e_shstrndx=30,
            )
        )
        assert header.e_ident.ei_magic == b"\x7fELF"
        assert header.e_ident.ei_class == 2
        assert header.e_ident.ei_data == 1
        assert header.e_ident.ei_version == 1
        assert header.e_type == 3
        assert header.e_machine == 183
        assert header.e_version == 1
        assert header.e_entry == 0xFFFF_FFFF_0000_1000
        assert header.e_phoff == 0x40
        assert header.e_shoff == 0x1_0000_0000
        assert header.e_flags == 0x5000000
        assert header.e_ehsize == 64
        assert header.e_phentsize == 56
        assert header.e_phnum == 13
        assert header.e_shentsize == 64
        assert header.e_shnum == 31
        assert header.e_shstrndx == 30
        assert header.type_name == "DYN (Shared object)"
        assert header.machine_name == "AArch64"

    def test_elf32_values_are_zero_extended(self):
        header = ElfHeader.parse(
            elf_header(32, e_machine=3, e_entry=0xFFFF_FFFF, e_shoff=0x8000_0000)
        )
        assert header.e_entry == 0xFFFF_FFFF
        assert header.e_shoff == 0x8000_0000
        assert header.e_phentsize == 32
        assert header.e_shentsize == 40
        assert header.machine_name == "x86"

    @pytest.mark.parametrize("bits", [32, 64])
    def test_zero_means_absent(self, bits):
        header = ElfHeader.parse(elf_header(bits))
        assert header.e_entry is None
        assert header.e_phoff is None
        assert header.e_shoff is None
        assert header.e_phnum is None
        assert header.e_shnum is None
        assert header.e_shstrndx is None
        # Mandatory fields keep a stored zero.
        assert header.e_flags == 0

    def test_unknown_names_render_as_hex(self):
        header = ElfHeader.parse(elf_header(64, e_type=0x1234, e_machine=0xBEEF))
        assert header.type_name == "0x1234"
        assert header.machine_name == "0xbeef"

    def test_processor_specific_type(self):
        header = ElfHeader.parse(elf_header(64, e_type=0xFF01))
        assert header.type_name == "LOPROC+0x1"


class TestLocations:
    def test_section_header_location(self):
        header = ElfHeader.parse(elf_header(64, e_shoff=0x1000, e_shnum=4))
        assert header.section_header_location(0) == ByteRange(0x1000, 0x1040)
        assert header.section_header_location(3) == ByteRange(0x10C0, 0x1100)

    def test_program_header_location_elf32(self):
        header = ElfHeader.parse(elf_header(32, e_phoff=0x34, e_phnum=2))
        assert header.program_header_location(1) == ByteRange(0x54, 0x74)

    @pytest.mark.parametrize("count,index", [(1, 1), (4, 4), (4, 100), (0xFFFF, 0xFFFF)])
    def test_index_at_or_past_count(self, count, index):
        header = ElfHeader.parse(
            elf_header(64, e_shoff=0x40, e_shnum=count, e_phoff=0x40, e_phnum=count)
        )
        assert header.section_header_location(index) is None
        assert header.program_header_location(index) is None

    def test_negative_index(self):
        header = ElfHeader.parse(elf_header(64, e_shoff=0x40, e_shnum=4))
        assert header.section_header_location(-1) is None

    def test_absent_tables(self):
        header = ElfHeader.parse(elf_header(64, e_shnum=4, e_phoff=0x40))
        assert header.section_header_location(0) is None
        assert header.program_header_location(0) is None
        assert header.section_headers_location() is None
        assert header.program_headers_location() is None

    def test_locations_saturate(self):
        header = ElfHeader.parse(
            elf_header(64, e_shoff=U64_MAX - 0x10, e_shnum=0xFFFF, e_shentsize=0xFFFF)
        )
        for index in (0, 1, 0xFFFE):
            location = header.section_header_location(index)
            assert location is not None
            assert location.start <= location.end
            assert location.end == U64_MAX

    def test_string_table_header_location(self):
        header = ElfHeader.parse(
            elf_header(64, e_shoff=0x200, e_shnum=8, e_shstrndx=7)
        )
        assert header.string_table_header_location() == header.section_header_location(7)

    def test_string_table_header_location_absent(self):
        header = ElfHeader.parse(elf_header(64, e_shoff=0x200, e_shnum=8))
        assert header.string_table_header_location() is None

    def test_string_table_index_past_table(self):
        header = ElfHeader.parse(
            elf_header(64, e_shoff=0x200, e_shnum=2, e_shstrndx=5)
        )
        assert header.e_shstrndx == 5
        assert header.string_table_header_location() is None

    def test_whole_table_locations(self):
        header = ElfHeader.parse(
            elf_header(64, e_shoff=0x200, e_shnum=3, e_phoff=0x40, e_phnum=2)
        )
        assert header.section_headers_location() == ByteRange(0x200, 0x2C0)
        assert header.program_headers_location() == ByteRange(0x40, 0xB0)
