from drf_spectacular.generators import SchemaGenerator


def test_schema_tag_grouping(db):
    generator = SchemaGenerator()
    schema = generator.get_schema(request=None, public=True)
    tags = {}
    for path, item in schema["paths"].items():
        for op in item.values():
            if isinstance(op, dict) and "tags" in op:
                tags.setdefault(path, op["tags"])

    assert tags["/api/v1/auth/jwt/create/"] == ["Authentication"]
    v1_tags = {t for p, ts in tags.items() if p.startswith("/api/v1/") for t in ts}
    assert {"Authentication", "Users", "Projects", "Tasks"} <= v1_tags
