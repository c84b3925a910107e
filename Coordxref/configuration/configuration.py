import copy
import dataclasses
from dataclasses import field
from typing import Optional
from marshmallow import validate
from marshmallow_dataclass import dataclass
from ..utilities.dbutils import DBConfiguration
from ..utilities.log_utils import LoggingConfiguration, create_null_logger
from ..exceptions import InvalidConfiguration


SUPPORTED_PROJECTS = ("ensembl", "ensemblgenomes")


@dataclass
class RunConfiguration:
    source_id: Optional[int] = field(default=None, metadata={
        "metadata": {"description": "ID of the source the parser is run for, in the xref database."},
        "validate": validate.Range(min=1)
    })
    species_id: Optional[int] = field(default=None, metadata={
        "metadata": {"description": "ID of the species (usually its taxonomy ID) in the xref database."},
        "validate": validate.Range(min=1)
    })
    species: Optional[str] = field(default=None, metadata={
        "metadata": {"description": "Production name of the species (e.g. homo_sapiens). If unset, it will be \
derived from the species table of the xref database."},
    })
    file: Optional[str] = field(default=None, metadata={
        "metadata": {"description": "Connection string for the annotation databases, in the format \
'script:project=>ensembl,host=>...,ofhost=>...'."},
    })
    verbose: bool = field(default=False, metadata={
        "metadata": {"description": "Boolean flag. If set, the parser will report source IDs and skipped \
accessions."},
    })


@dataclass
class FileParameters:
    """
    Connection parameters for the core (host, port, user, pass) and otherfeatures
    (ofhost, ofport, ofuser, ofpass) databases.
    """

    project: Optional[str] = field(default=None, metadata={
        "metadata": {"description": "Either ensembl or ensemblgenomes to look for the databases on the staging \
servers. Any other value requires an explicit database adaptor."},
    })
    host: Optional[str] = field(default=None)
    port: int = field(default=3306, metadata={"validate": validate.Range(min=1)})
    user: str = field(default="ensro")
    pass_: str = field(default="", metadata={"data_key": "pass"})
    ofhost: Optional[str] = field(default=None)
    ofport: int = field(default=3306, metadata={"validate": validate.Range(min=1)})
    ofuser: str = field(default="ensro")
    ofpass: str = field(default="")


@dataclass
class CoordxrefConfiguration:
    """
    Configuration properties for Coordxref.
    """

    log_settings: LoggingConfiguration = field(default_factory=LoggingConfiguration, metadata={
                "metadata": {"description": "Settings related to the verbosity of logs"}
    })
    db_settings: DBConfiguration = field(default_factory=DBConfiguration, metadata={
                "metadata": {"description": "Settings related to the connection to the xref database"}
    })
    run: RunConfiguration = field(default_factory=RunConfiguration, metadata={
                "metadata": {"description": "Parameters of the RefSeq coordinate parser run"}
    })
    filename: Optional[str] = field(default=None)

    def __post_init__(self):
        self.check()

    def copy(self):
        return copy.deepcopy(self)

    def check(self, logger=create_null_logger()):
        errors = self.Schema().validate(self.Schema().dump(self))
        if len(errors) > 0:
            exc = InvalidConfiguration(f"The configuration is invalid, please double check. Errors:\n{errors}")
            logger.critical(exc)
            raise exc

    def as_dict(self):
        return dataclasses.asdict(self)
