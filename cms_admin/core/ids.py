import uuid

def gen_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def normalize_record_id(value) -> str | None:
    """
    Backend ids arrive as str or int; compare them as str.
    Empty / missing ids normalize to None; any other id is kept verbatim.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    s = str(value)
    return s if s.strip() else None
