"""Shared helpers for building in-memory 3MF archives."""

import io
import zipfile

import pytest

SLICE_INFO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<config>
  <header>
    <header_item key="X-BBL-Client-Type" value="slicer"/>
  </header>
  <plate>
    <metadata key="index" value="1"/>
    <metadata key="prediction" value="5829"/>
    <metadata key="weight" value="17.02"/>
    <filament id="1" type="PLA" color="#FFFFFF" used_m="5.66" used_g="17.02"/>
  </plate>
  <plate>
    <metadata key="index" value="2"/>
    <metadata key="prediction" value="150"/>
    <metadata key="weight" value="1.50"/>
    <filament id="1" type="PETG" color="#000000" used_m="0.50" used_g="1.50"/>
  </plate>
</config>
"""


def build_3mf(entries: dict[str, str | bytes]) -> bytes:
    """Zip *entries* (name -> content) into 3MF archive bytes, in order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


@pytest.fixture
def make_3mf():
    return build_3mf


@pytest.fixture
def slice_info_xml():
    return SLICE_INFO_XML
