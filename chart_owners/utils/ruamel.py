from ruamel import yaml


def create_ruamel_instance(
    typ: str = "rt",
    explicit_start: bool = False,
    width: int = 4096,
    pure: bool = False,
) -> yaml.YAML:
    ruamel_instance = yaml.YAML(typ=typ, pure=pure)

    ruamel_instance.default_flow_style = False
    ruamel_instance.explicit_start = explicit_start
    ruamel_instance.width = width

    return ruamel_instance
