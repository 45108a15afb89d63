import inspect
import importlib
from pathlib import Path

MODULES = [
    "tidysf.models.feature_collection",
    "tidysf.models.geometry",
    "tidysf.models.crs",
    "tidysf.io.feature_io",
    "tidysf.verbs",
]

ROOT = Path(__file__).resolve().parent.parent
OUTPUT_DIR = ROOT / "docs" / "source" / "api"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


def _signature(obj) -> str:
    try:
        return str(inspect.signature(obj))
    except (TypeError, ValueError):
        return "(...)"


def doc_for_module(module_name):
    module = importlib.import_module(module_name)
    out = [f"# {module_name}", "", inspect.getdoc(module) or "", ""]

    for name, obj in inspect.getmembers(module):
        if name.startswith("_"):
            continue
        # só o que é definido (ou reexportado) pelo pacote
        if not getattr(obj, "__module__", "").startswith("tidysf"):
            continue

        if inspect.isclass(obj):
            out += [f"## Classe {name}", "", inspect.getdoc(obj) or "*Sem docstring.*", ""]
            for method_name, method in inspect.getmembers(obj, inspect.isfunction):
                if method_name.startswith("_"):
                    continue
                out += [
                    f"### {name}.{method_name}",
                    "",
                    "```python",
                    f"{name}.{method_name}{_signature(method)}",
                    "```",
                    "",
                    inspect.getdoc(method) or "*Sem docstring.*",
                    "",
                ]
        elif inspect.isfunction(obj):
            out += [
                f"## {name}",
                "",
                "```python",
                f"{name}{_signature(obj)}",
                "```",
                "",
                inspect.getdoc(obj) or "*Sem docstring.*",
                "",
            ]

    return "\n".join(out)


if __name__ == "__main__":
    for m in MODULES:
        md = doc_for_module(m)
        fname = m.replace(".", "_") + ".md"
        (OUTPUT_DIR / fname).write_text(md, encoding="utf-8")
        print(f"[OK] gerado: docs/source/api/{fname}")
