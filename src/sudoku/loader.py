import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

PUZZLE_KEYS = ("puzzle", "quizzes", "quiz", "grid", "board")
SOLUTION_KEYS = ("solution", "solutions")
SUPPORTED_SUFFIXES = (".parquet", ".csv", ".json", ".jsonl", ".txt", ".sdk")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .parquet, .csv, .json and .jsonl datasets,
    and plain text files holding either one box-format grid or one 81-character
    puzzle per line.
    Returns a list of records with `id`, `puzzle` and (when known) `solution`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = Path(file_path).stem

    def _coerce_text(value: Any) -> Optional[str]:
        if value is None:
            return None
        if hasattr(value, "tolist"):
            value = value.tolist()
        if isinstance(value, (list, tuple)):
            flat = []
            for item in value:
                flat.extend(item if isinstance(item, (list, tuple)) else [item])
            return "".join(str(v) for v in flat)
        if isinstance(value, float) and value != value:  # NaN from pandas
            return None
        text = str(value).strip()
        return text or None

    def _first(record: Dict[str, Any], keys) -> Optional[str]:
        for key in keys:
            text = _coerce_text(record.get(key))
            if text:
                return text
        return None

    def _normalize_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
        normalized = dict(record)
        puzzle_text = _first(record, PUZZLE_KEYS)
        if puzzle_text:
            normalized["puzzle"] = puzzle_text
        solution_text = _first(record, SOLUTION_KEYS)
        if solution_text:
            normalized["solution"] = solution_text
        normalized["id"] = _coerce_text(record.get("id")) or f"{stem}-{index}"
        return normalized

    def _normalize_all(records: List[Any]) -> List[Dict[str, Any]]:
        return [
            _normalize_record(record, i)
            for i, record in enumerate(r for r in records if isinstance(r, dict))
        ]

    # Case 1: Parquet / CSV datasets (tabular)
    if file_path.endswith('.parquet'):
        df = pd.read_parquet(file_path)
        return _normalize_all(df.to_dict(orient="records"))

    if file_path.endswith('.csv'):
        # Keep leading zeros in 81-digit puzzle strings.
        df = pd.read_csv(file_path, dtype=str)
        return _normalize_all(df.to_dict(orient="records"))

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if isinstance(payload, list):
                return _normalize_all(payload)
            if isinstance(payload, dict):
                return _normalize_all([payload])
            return []
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _load_jsonl(file_path, _normalize_all)

    # Case 3: JSONL File (Text)
    if file_path.endswith(".jsonl"):
        return _load_jsonl(file_path, _normalize_all)

    # Case 4: Plain text, one box grid or one puzzle string per line
    with open(file_path, "r", encoding="utf-8") as f:
        text = f.read()
    if text.lstrip().startswith("+"):
        return _normalize_all([{"id": stem, "puzzle": text}])
    lines = [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    return _normalize_all([{"puzzle": line} for line in lines])


def _load_jsonl(file_path: str, normalize) -> List[Dict[str, Any]]:
    data = []
    with open(file_path, 'r', encoding='utf-8') as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            data.append(obj)
    return normalize(data)
