from uuid import uuid4


def generate_short_id() -> str:
    """Short entity id, e.g. 'id-3f9a0c12b'."""
    return 'id-' + uuid4().hex[:9]
