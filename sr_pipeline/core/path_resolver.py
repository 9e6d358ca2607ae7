"""
Cross-platform path resolution for the SR Pipeline.
Locates model files, upscaler executables and scratch directories.
"""
import os
import platform
import shutil
import tempfile
from pathlib import Path
from typing import Optional, List


class PathResolver:
    """Central path resolution for cross-platform compatibility."""

    def __init__(self):
        self.platform = platform.system()  # 'Linux', 'Darwin', 'Windows'
        self.home = Path.home()
        self.project_root = self._find_project_root()

    def _find_project_root(self) -> Path:
        """Find project root by looking for marker files."""
        current = Path(__file__).resolve().parent
        while current != current.parent:
            if (current / 'pyproject.toml').exists() or (current / 'setup.py').exists():
                return current
            current = current.parent
        return Path.cwd()

    def get_data_dir(self) -> Path:
        """Get platform-appropriate data directory."""
        if env_dir := os.environ.get('SR_PIPELINE_DATA'):
            return Path(env_dir)

        if self.platform == 'Windows':
            base = Path(os.environ.get('LOCALAPPDATA', self.home / 'AppData/Local'))
            return base / 'sr-pipeline/data'
        elif self.platform == 'Darwin':
            return self.home / 'Library/Application Support/sr-pipeline'
        else:
            xdg_data = os.environ.get('XDG_DATA_HOME', self.home / '.local/share')
            return Path(xdg_data) / 'sr-pipeline'

    def get_temp_dir(self) -> Path:
        """Get platform-appropriate temporary directory."""
        if env_dir := os.environ.get('SR_PIPELINE_TEMP'):
            return Path(env_dir)
        return Path(tempfile.gettempdir())

    def find_executable(self, name: str, search_paths: Optional[List[str]] = None) -> Optional[Path]:
        """Find executable via env override, PATH, then extra directories."""
        env_var = f"SR_PIPELINE_{name.upper().replace('-', '_')}_PATH"
        if env_path := os.environ.get(env_var):
            path = Path(env_path)
            if path.exists() and os.access(path, os.X_OK):
                return path

        if found := shutil.which(name):
            return Path(found)

        for search_path in search_paths or []:
            path = Path(search_path).expanduser() / name
            if path.exists() and os.access(path, os.X_OK):
                return path
            if self.platform == 'Windows':
                for ext in ['.exe', '.bat', '.cmd']:
                    path_with_ext = path.with_name(f"{name}{ext}")
                    if path_with_ext.exists():
                        return path_with_ext

        return None

    def get_model_search_paths(self) -> List[Path]:
        """Existing directories that may hold model weights."""
        paths = []

        if env_dir := os.environ.get('SR_PIPELINE_MODEL_DIR'):
            paths.append(Path(env_dir))

        paths.append(self.project_root / 'models')
        paths.append(self.get_data_dir() / 'models')
        paths.append(Path('/opt/sr-models'))

        return [p for p in paths if p.exists()]

    def find_model_file(self, filename: str, extra_paths: Optional[List[str]] = None) -> Optional[Path]:
        """Resolve a weights file, absolute paths first, then search paths."""
        candidate = Path(filename).expanduser()
        if candidate.is_absolute():
            return candidate if candidate.exists() else None

        directories = [Path(p).expanduser() for p in extra_paths or []]
        directories += self.get_model_search_paths()
        for directory in directories:
            path = directory / filename
            if path.exists():
                return path
        return None


# Singleton instance
_resolver = None

def get_resolver() -> PathResolver:
    """Get singleton PathResolver instance."""
    global _resolver
    if _resolver is None:
        _resolver = PathResolver()
    return _resolver
