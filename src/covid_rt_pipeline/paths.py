from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

RT_SUMMARY_FILE = 'oecd-rep-num.csv'
CASE_SUMMARY_FILE = 'oecd-cases.csv'
FIGURE_FILE = 'oecd-rep-num-cases.png'
MANIFEST_FILE = 'estimation-manifest.csv'
SPECIFICATION_FILE = 'specification.yaml'


@dataclass
class RtPaths:
    """Local output structure of a comparison run.

    All outputs live directly in the root directory and are overwritten by
    every run.

    """
    root_dir: Path
    read_only: bool = field(default=True)

    def __post_init__(self):
        self.root_dir = Path(self.root_dir)

    @property
    def rt_summary_file(self) -> Path:
        return self.root_dir / RT_SUMMARY_FILE

    @property
    def case_summary_file(self) -> Path:
        return self.root_dir / CASE_SUMMARY_FILE

    @property
    def figure_file(self) -> Path:
        return self.root_dir / FIGURE_FILE

    @property
    def manifest_file(self) -> Path:
        return self.root_dir / MANIFEST_FILE

    @property
    def specification_file(self) -> Path:
        return self.root_dir / SPECIFICATION_FILE

    def make_dirs(self):
        """Builds the local directory structure."""
        if self.read_only:
            raise RuntimeError(f"Tried to create directory structure when "
                               f"{self.__class__.__name__} was in read_only mode. "
                               f"Try instantiating with read_only=False.")

        logger.debug(f'Creating output directory for {self.__class__.__name__} '
                     f'in {self.root_dir}.')
        self.root_dir.mkdir(parents=True, exist_ok=True)
