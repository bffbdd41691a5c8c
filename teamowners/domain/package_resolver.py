def resolve_package(identifier: str) -> str:
    """
    Extract the package name from a stack-frame-like identifier.

    Identifiers without "(" are returned unchanged. Otherwise the text before
    the first "(" is assumed to have the shape `package.Class.method`, and the
    last two dot-separated segments are dropped:

        "com.acme.billing.Invoice.charge(Invoice.java:42)" -> "com.acme.billing"

    If fewer than two dots precede the "(", only the segments actually found
    are dropped ("Invoice.charge(x)" -> "Invoice", "charge(x)" -> "charge").

    This is a fixed heuristic. Dotted inner class names
    ("pkg.Outer.Inner.method(") and other extra segments leave part of the
    class name in the result; "$"-separated inner classes resolve correctly.
    """
    boundary = identifier.find("(")
    if boundary == -1:
        return identifier

    for _ in range(2):
        dot = identifier.rfind(".", 0, boundary)
        if dot == -1:
            break
        boundary = dot

    return identifier[:boundary]
