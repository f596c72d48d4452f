import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import proofsheet
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def tmp_job_number():
    """Return a test job number."""
    return "J-1042"


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing an image file and returning its path."""
    counter = {"n": 0}

    def _make(size=(200, 100), fmt="PNG", mode="RGB", color="white", name=None):
        counter["n"] += 1
        suffix = {"PNG": ".png", "JPEG": ".jpg", "TIFF": ".tiff", "WEBP": ".webp"}[fmt]
        path = tmp_path / (name or f"image{counter['n']}{suffix}")
        Image.new(mode, size, color=color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def panorama_path(make_image):
    """3000x1000 PNG (aspect ratio 3.0)."""
    return make_image(size=(3000, 1000), fmt="PNG", color="navy", name="panorama.png")


@pytest.fixture
def portrait_path(make_image):
    """1000x1500 JPEG (aspect ratio 0.667)."""
    return make_image(size=(1000, 1500), fmt="JPEG", color="teal", name="portrait.jpg")
