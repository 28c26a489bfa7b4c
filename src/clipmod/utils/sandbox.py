"""Entry point executed inside the throwaway modifier process.

Kept free of heavy imports: with the spawn start method every evaluation
starts a new interpreter that imports this module.
"""

OK = "ok"
FAILED = "failed"

ENTRY_POINT = "modify"


def evaluate_modifier(source, text, results):
    namespace = {"__name__": "__modifier__"}
    try:
        code = compile(source, "<modifier>", "exec")
        exec(code, namespace)
        modify = namespace.get(ENTRY_POINT)
        if not callable(modify):
            results.put((FAILED, f"script does not define a callable {ENTRY_POINT!r}"))
            return
        output = modify(text)
    except Exception as e:
        results.put((FAILED, f"{type(e).__name__}: {e}"))
        return

    if not isinstance(output, str):
        results.put((FAILED, f"{ENTRY_POINT} returned {type(output).__name__}, expected str"))
        return
    results.put((OK, output))
