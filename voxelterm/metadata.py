"""Human readable header summary shown in the metadata view."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

KeyValueList = List[Tuple[str, str]]


def _decode(value) -> str:
    raw = np.asarray(value).item()
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8").rstrip("\x00")
        except UnicodeDecodeError:
            return "<error>"
    return str(raw)


def _fmt_row(values) -> str:
    return "[" + ", ".join(f"{float(v):g}" for v in values) + "]"


def _nifti_entries(header) -> KeyValueList:
    ndim = int(header["dim"][0])
    space, time = header.get_xyzt_units()
    try:
        slice_order = header.get_value_label("slice_code")
    except (KeyError, ValueError):
        slice_order = "unknown"
    return [
        ("Data type", str(header.get_data_dtype())),
        ("Ndim", str(ndim)),
        ("Shape", str(tuple(int(d) for d in header.get_data_shape()))),
        ("Units", f"{space} (space); {time} (time)"),
        (
            "Data scaling",
            f"{float(header['scl_inter']):g} + {float(header['scl_slope']):g} * x",
        ),
        (
            "Display range",
            f"[{float(header['cal_min']):g}, {float(header['cal_max']):g}]",
        ),
        ("Description", f"'{_decode(header['descrip'])}'"),
        ("Intent", f"'{_decode(header['intent_name'])}'"),
        ("Slice order", slice_order),
        ("Slice duration", f"{float(header['slice_duration']):g}"),
        ("Affine", _fmt_row(header["srow_x"])),
        ("", _fmt_row(header["srow_y"])),
        ("", _fmt_row(header["srow_z"])),
        ("Grid spacings", _fmt_row(header.get_zooms())),
        (
            "Grid offsets",
            _fmt_row([header["qoffset_x"], header["qoffset_y"], header["qoffset_z"]]),
        ),
    ]


def make_metadata_entries(volume) -> KeyValueList:
    """Key/value rows describing ``volume``.

    NIfTI headers get the full listing; anything else (synthetic volumes,
    other nibabel formats) falls back to what :class:`VolumeHeader` knows.
    """
    raw = volume.header.raw
    if raw is not None and "srow_x" in getattr(raw, "keys", lambda: ())():
        return _nifti_entries(raw)

    header = volume.header
    affine = np.asarray(header.affine)
    entries: KeyValueList = [
        ("Data type", str(header.dtype)),
        ("Ndim", str(volume.array.ndim)),
        ("Shape", str(tuple(volume.array.shape))),
        ("Units", f"{header.space_units} (space)"),
    ]
    if header.display_range is not None:
        lo, hi = header.display_range
        entries.append(("Display range", f"[{lo:g}, {hi:g}]"))
    entries.extend(
        [
            ("Affine", _fmt_row(affine[0])),
            ("", _fmt_row(affine[1])),
            ("", _fmt_row(affine[2])),
            ("Grid spacings", _fmt_row(header.spacing)),
        ]
    )
    return entries
