from typing import Any, Dict, Iterable


def exclude_keys(data: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Drop server-generated fields (ids, timestamps) before comparing payloads"""
    dropped = set(keys)
    return {key: value for key, value in data.items() if key not in dropped}
