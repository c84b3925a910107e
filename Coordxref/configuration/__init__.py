"""
This module defines the functions needed to check the sanity of the configuration file,
plus the functions to print it out with the description of each field.
"""

import textwrap
import rapidjson as json
import toml
import yaml
from .configuration import CoordxrefConfiguration, FileParameters, RunConfiguration, SUPPORTED_PROJECTS
from . import configurator


__author__ = "Coordxref developers"


def _description(level, key):
    """Description of a field of a configuration dataclass, if any."""
    if not hasattr(level, "Schema"):
        return None
    field_dc = level.Schema._declared_fields.get(key)
    if field_dc is None:
        return None
    return field_dc.metadata.get("description", None)


def _comment(description, key=None, spaces=0):
    if not description:
        return []
    wrapped = textwrap.wrap(description)
    if key is not None and wrapped:
        wrapped[0] = key + ": " + wrapped[0]
    return [" " * spaces + "# " + _ for _ in wrapped]


def print_config(config: CoordxrefConfiguration, out, output_format="yaml"):
    """
    Function to print out the configuration, adding the descriptions as comments preceded by #
    (in YAML and TOML formats).
    :param config: configuration
    :type config: CoordxrefConfiguration

    :param out: output handle
    :type out: [io.TextIOWrapper|io.TextIO]

    :param output_format: one of yaml, json or toml (case-insensitive)
    :type output_format: str
    """

    if not isinstance(output_format, str) or output_format.lower() not in ("yaml", "json", "toml"):
        raise ValueError("Unknown format: {}. I can only accept yaml, json or toml as options.".format(
            output_format))

    output_format = output_format.lower()
    config_dict = config.as_dict()

    if output_format == "toml":
        # TOML has no null value
        config_dict = _strip_none(config_dict)
        print_toml_config(config_dict, config, out)
    elif output_format == "yaml":
        print_yaml_config(config_dict, config, out)
    elif output_format == "json":
        print(json.dumps(config_dict, indent=4, sort_keys=True), file=out)


def _strip_none(data: dict) -> dict:
    cleared = dict()
    for key, value in data.items():
        if isinstance(value, dict):
            cleared[key] = _strip_none(value)
        elif value is not None:
            cleared[key] = value
    return cleared


def print_toml_config(config_dict: dict, config: CoordxrefConfiguration, out):

    """Function to print out the configuration in TOML format, adding the descriptions as comments preceded by #.
    :param config_dict: the configuration dictionary
    :type config_dict: dict

    :param config: configuration object
    :type config: CoordxrefConfiguration

    :param out: output handle
    :type out: io.TextIOWrapper
    """

    output = toml.dumps(config_dict)

    lines = []
    level = config

    for line in output.split("\n"):
        if line.startswith("["):
            key = line.rstrip().replace("[", "").replace("]", "")
            lines.append(line)
            lines.extend(_comment(_description(config, key)))
            level = getattr(config, key)
        else:
            if "=" in line:
                key = line.split("=")[0].strip()
                lines.extend(_comment(_description(level, key), key=key))
            lines.append(line.rstrip())

    if config.__doc__:
        print(*["# " + _ for _ in textwrap.wrap(config.__doc__.strip())], sep="\n", file=out)
        print("#", file=out)

    print(*lines, sep="\n", file=out)


def print_yaml_config(config_dict: dict, config: CoordxrefConfiguration, out):
    """
    Function to print out the configuration in YAML format, adding the descriptions as comments preceded by #.
    :param config_dict: the configuration dictionary
    :type config_dict: dict

    :param config: configuration object
    :type config: CoordxrefConfiguration

    :param out: output handle
    :type out: io.TextIOWrapper
    """

    output = yaml.dump(config_dict, default_flow_style=False)
    lines = []
    level = config

    for line in output.split("\n"):
        if not line:
            continue
        spaces = len(line) - len(line.lstrip())
        key = line.split(":")[0].strip()
        if spaces == 0:
            level = config
        if line.endswith(":") and spaces == 0:  # New section
            lines.append(line)
            lines.extend(_comment(_description(config, key)))
            level = getattr(config, key)
        else:
            lines.extend(_comment(_description(level, key), key=key, spaces=spaces))
            lines.append(line.rstrip())

    if config.__doc__:
        print(*["# " + _ for _ in textwrap.wrap(config.__doc__.strip())], sep="\n", file=out)
        print("#", file=out)

    print(*lines, sep="\n", file=out)
