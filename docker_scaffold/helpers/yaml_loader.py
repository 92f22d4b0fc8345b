"""Round-trip YAML I/O for the answers file.

Comments and key order in ``docker-scaffold.yaml`` survive a load/save
cycle, so ``--save-config`` only changes the answers it owns.
"""

from pathlib import Path
from typing import Union, cast

from ruamel.yaml import YAML

ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]

yaml = YAML()
yaml.preserve_quotes = True
yaml.default_flow_style = False


def load_yaml_file(file_path: Path) -> ConfigDict:
    """Load an answers file, keeping comments for a later save.

    Raises:
        FileNotFoundError: If file does not exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding='utf-8') as f:
        raw: ConfigValue = yaml.load(f)
    if raw is None:
        return {}
    return cast(ConfigDict, raw)


def save_yaml_file(data: ConfigDict, file_path: Path) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open('w', encoding='utf-8') as f:
        yaml.dump(data, f)
