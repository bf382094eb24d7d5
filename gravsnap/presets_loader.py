#!/usr/bin/env python3
"""
Mass preset JSON loading utilities.

A preset is a named set of attractors given as fractions of the canvas size, so
the same preset works at any resolution and with any number of masses.

Schema (presets/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "gravity": 30.0,                  # optional, overrides the run's gravity
  "masses": [[0.5, 0.25], [0.25, 0.75], [0.75, 0.75]]
}

Users can drop their own JSON files into the presets folder, or pass a path to
a JSON file anywhere on disk.
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

PRESETS_DIR = os.path.join(os.path.dirname(__file__), "presets")


@dataclass(frozen=True)
class Preset:
  name: str
  masses: Tuple[Tuple[float, float], ...]
  description: str = ""
  gravity: Optional[float] = None


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, json.JSONDecodeError) as exc:
    logger.warning("Could not read preset %s: %s", path, exc)
    return None


def _coerce_masses(items) -> Tuple[Tuple[float, float], ...]:
  masses = []
  for item in items:
    fx, fy = float(item[0]), float(item[1])
    masses.append((fx, fy))
  return tuple(masses)


def resolve_preset_path(name_or_path: str) -> str:
  """A path to an existing file wins; otherwise look up <name>.json in the presets folder."""
  if os.path.isfile(name_or_path):
    return name_or_path
  file_name = name_or_path if name_or_path.lower().endswith(".json") else name_or_path + ".json"
  return os.path.join(PRESETS_DIR, file_name)


def list_presets() -> List[Tuple[str, str]]:
  """Return list of (preset_key, display_name) for bundled presets."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(PRESETS_DIR):
    return items
  for fn in sorted(os.listdir(PRESETS_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(PRESETS_DIR, fn)) or {}
    key = os.path.splitext(fn)[0]
    items.append((key, data.get("name") or key))
  return items


def load_preset(name_or_path: str) -> Optional[Preset]:
  """
  Load a preset by bundled name or file path.
  Returns None when the file is missing or malformed.
  """
  path = resolve_preset_path(name_or_path)
  data = _read_json(path)
  if not isinstance(data, dict):
    return None
  try:
    masses = _coerce_masses(data["masses"])
    gravity = data.get("gravity")
    gravity = float(gravity) if gravity is not None else None
  except (KeyError, TypeError, ValueError, IndexError) as exc:
    logger.warning("Malformed preset %s: %s", path, exc)
    return None
  if not masses:
    logger.warning("Preset %s defines no masses", path)
    return None
  return Preset(
    name=data.get("name") or os.path.splitext(os.path.basename(path))[0],
    masses=masses,
    description=data.get("description", ""),
    gravity=gravity,
  )
