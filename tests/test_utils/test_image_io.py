"""
Tests for file I/O helpers and the command-line front end.
"""

import importlib.util
from pathlib import Path

import cv2
import numpy as np
import pytest

from docthresh.core.pipeline import binarize
from docthresh.utils.image import imread, imsave


SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "binarize.py"


@pytest.fixture
def cli():
	spec = importlib.util.spec_from_file_location("binarize_cli", SCRIPT)
	module = importlib.util.module_from_spec(spec)
	spec.loader.exec_module(module)
	return module


@pytest.fixture
def page_file(tmp_path, document_gray):
	path = tmp_path / "page.png"
	bgr = cv2.cvtColor(document_gray, cv2.COLOR_GRAY2BGR)
	cv2.imwrite(str(path), bgr)
	return path


class TestImageIO:
	"""Test suite for imread/imsave."""

	def test_read_color_file(self, tmp_path):
		path = tmp_path / "red.png"
		bgr = np.zeros((3, 4, 3), dtype=np.uint8)
		bgr[..., 2] = 255
		cv2.imwrite(str(path), bgr)

		raster = imread(path)
		rgba = raster.as_array()
		assert (raster.width, raster.height) == (4, 3)
		assert rgba[0, 0].tolist() == [255, 0, 0, 255]

	def test_read_missing_file(self, tmp_path):
		with pytest.raises(FileNotFoundError):
			imread(tmp_path / "missing.png")

	def test_save_binary_png(self, tmp_path, document_raster):
		binary = binarize("sauvola", document_raster)
		path = imsave(tmp_path / "out" / "page.png", binary)

		written = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
		assert np.array_equal(written, binary.mask)


class TestCommandLine:
	"""Test suite for scripts/binarize.py."""

	def test_list_methods(self, cli, capsys):
		assert cli.main(["--list-methods"]) == 0
		out = capsys.readouterr().out
		assert "WOLF" in out
		assert "T.R. Singh" in out

	def test_single_image(self, cli, page_file, tmp_path):
		output = tmp_path / "result.png"
		code = cli.main(["-m", "sauvola", "--param", "5", "-i", str(page_file), "-o", str(output)])

		assert code == 0
		assert output.exists()

	def test_compare(self, cli, page_file, tmp_path):
		out_dir = tmp_path / "cmp"
		code = cli.main(["--compare", "otsu,wan", "-i", str(page_file), "--output-dir", str(out_dir)])

		assert code == 0
		assert (out_dir / "binarized_otsu.png").exists()
		assert (out_dir / "binarized_wan.png").exists()

	def test_batch(self, cli, page_file, tmp_path):
		out_dir = tmp_path / "batch"
		code = cli.main(["-m", "nick", "--input-dir", str(page_file.parent), "--output-dir", str(out_dir)])

		assert code == 0
		assert (out_dir / "page_binary.png").exists()

	def test_unknown_method(self, cli, page_file, tmp_path):
		code = cli.main(["-m", "bernsen", "-i", str(page_file), "-o", str(tmp_path / "x.png")])
		assert code == 1

	def test_missing_output(self, cli, page_file):
		assert cli.main(["-i", str(page_file)]) == 1
