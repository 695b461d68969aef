# src/copydeck/core/utils/console_output.py
from pathlib import Path
from typing import Dict

SEVERITY_ICONS = {
    "Critical": "🔴",
    "High": "🟡",
    "Medium": "🔵",
    "Low": "🟠",
    "None": "⚪",
}


def print_severity_summary(counts: Dict[str, int]) -> None:
    """Prints the per-severity item counts of an audit run."""
    print("\n📊 Issues by severity:")
    for severity, count in counts.items():
        print(f"   {SEVERITY_ICONS.get(severity, '-')} {severity:<9} {count}")


def print_outputs(outputs: Dict[str, Path]) -> None:
    print("\n📁 Files written:")
    for label, path in outputs.items():
        print(f"   {label:<12} {path}")
