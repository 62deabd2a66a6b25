#!/usr/bin/env python3
"""
Command-line interface for document binarization.
Usage:
	python scripts/binarize.py --method sauvola --input doc.jpg --output result.png
	python scripts/binarize.py --compare otsu,niblack,wolf --input doc.jpg --output-dir results/
	python scripts/binarize.py --method otsu --input-dir images/ --output-dir results/
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from docthresh.core.base import ValidationError
from docthresh.core.config import ConfigLoader, PipelineConfig, get_default_config
from docthresh.core.pipeline import Binarizer
from docthresh.methods.catalog import clamp_parameter, list_specs
from docthresh.utils.image import imread, imsave
from docthresh.utils.logger import get_logger


IMAGE_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp']


def parse_args(argv: Optional[List[str]] = None):
	"""Parse command line arguments."""
	parser = argparse.ArgumentParser(
		description='Document Image Binarization Tool',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  # Single image with Otsu
  %(prog)s --method otsu --input document.jpg --output result.png

  # Local method with a custom k
  %(prog)s --method sauvola --param 0.3 --input document.jpg --output result.png

  # Side-by-side comparison, one PNG per method
  %(prog)s --compare otsu,niblack,sauvola --input document.jpg --output-dir results/

  # Batch processing
  %(prog)s --method wolf --input-dir images/ --output-dir results/

  # List available methods
  %(prog)s --list-methods
		"""
	)

	# Input/output
	parser.add_argument('-i', '--input', type=str, help='Input image path')
	parser.add_argument('-o', '--output', type=str, help='Output image path')
	parser.add_argument('--input-dir', type=str, help='Input directory for batch processing')
	parser.add_argument('--output-dir', type=str, help='Output directory for batch processing or --compare')

	# Method selection
	parser.add_argument('-m', '--method', type=str, default=None, help='Binarization method (default: otsu)')
	parser.add_argument('--param', type=float, default=None, help='Method parameter k (p for trsingh), clamped to its valid range')
	parser.add_argument('--compare', type=str, help='Comma-separated methods to run side by side on --input')
	parser.add_argument('--list-methods', action='store_true', help='List all available methods and exit')

	# Configuration
	parser.add_argument('-c', '--config', type=str, help='Configuration file (YAML or JSON)')
	parser.add_argument('--workers', type=int, help='Worker threads for the per-pixel pass')

	# Output options
	parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

	return parser.parse_args(argv)


def list_methods_info():
	"""Print information about all available methods."""
	print("\n" + "="*60)
	print("Available Binarization Methods")
	print("="*60 + "\n")

	for spec in list_specs():
		print(f"• {spec.identifier.upper()}  {spec.name} ({spec.year})")
		print(f"  Description: {spec.description}")
		if spec.parameter_name is not None:
			low, high = spec.parameter_range
			print(f"  Parameter: {spec.parameter_name} = {spec.default_parameter} (range {low} to {high})")
		print()


def build_config(args) -> PipelineConfig:
	"""Load the config file, then apply command-line overrides."""
	if args.config:
		config = ConfigLoader.load_config(Path(args.config))
	else:
		config = get_default_config()

	if args.method:
		config.method = args.method
	if args.param is not None:
		config.parameter = args.param
	if args.workers is not None:
		config.num_workers = max(1, args.workers)

	config.parameter = clamp_parameter(config.method, config.parameter)
	return config


def process_single_image(
	binarizer: Binarizer,
	input_path: Path,
	output_path: Path,
	verbose: bool = False
) -> dict:
	"""
	Process a single image.
	Args:
		binarizer: Configured binarizer
		input_path: Input image path
		output_path: Output image path
		verbose: Print verbose output
	Returns:
		Result dictionary
	"""
	method_name = binarizer.config.method
	if verbose:
		print(f"Processing: {input_path.name}")

	try:
		raster = imread(input_path)
		result = binarizer.run(method_name, raster)
		imsave(output_path, result.binary_image)

		if verbose:
			print(f"  ✓ Saved to: {output_path}")
			print(f"  Threshold: {result.threshold:.1f}")
			print(f"  Time: {result.processing_time:.4f}s")

		return {
			'input': str(input_path),
			'output': str(output_path),
			'method': method_name,
			'threshold': result.threshold,
			'time': result.processing_time,
			'success': True
		}

	except (FileNotFoundError, ValidationError, IOError) as e:
		print(f"Error processing {input_path}: {e}")
		return {
			'input': str(input_path),
			'success': False,
			'error': str(e)
		}


def process_batch(
	binarizer: Binarizer,
	input_dir: Path,
	output_dir: Path,
	verbose: bool = False
) -> List[dict]:
	"""
	Process all images in a directory.
	Returns:
		List of result dictionaries
	"""
	image_paths = sorted(
		p for p in input_dir.iterdir()
		if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
	)

	if not image_paths:
		print(f"No images found in {input_dir}")
		return []

	print(f"\nFound {len(image_paths)} images")
	print(f"Processing with method: {binarizer.config.method}")
	print("-" * 60)

	results = []
	start_time = time.time()

	for i, input_path in enumerate(image_paths, 1):
		if verbose:
			print(f"\n[{i}/{len(image_paths)}] ", end='')

		output_path = output_dir / f"{input_path.stem}_binary.png"
		results.append(process_single_image(binarizer, input_path, output_path, verbose))

	total_time = time.time() - start_time

	print("\n" + "="*60)
	print("Summary")
	print("="*60)
	successful = sum(1 for r in results if r.get('success', False))
	print(f"Processed: {successful}/{len(image_paths)} images")
	print(f"Total time: {total_time:.2f}s")
	print(f"Average time: {total_time/len(image_paths):.4f}s per image")

	return results


def process_comparison(
	binarizer: Binarizer,
	input_path: Path,
	output_dir: Path,
	method_names: List[str],
	param: Optional[float]
) -> int:
	"""Run several methods on one image and write binarized_<method>.png for each."""
	raster = imread(input_path)
	parameters = {name: clamp_parameter(name, param) for name in method_names}

	results = binarizer.compare(method_names, raster, parameters)
	for name, result in results.items():
		path = imsave(output_dir / f"binarized_{name}.png", result.binary_image)
		print(f"{name:>10}: threshold {result.threshold:7.2f}  {result.processing_time:.3f}s  -> {path}")
	return 0


def main(argv: Optional[List[str]] = None):
	"""Main entry point."""
	args = parse_args(argv)

	# List methods and exit
	if args.list_methods:
		list_methods_info()
		return 0

	if args.compare:
		if not args.input or not args.output_dir:
			print("Error: --compare needs --input and --output-dir")
			return 1
	elif not args.input and not args.input_dir:
		print("Error: Either --input or --input-dir must be specified")
		return 1
	elif args.input and not args.output:
		print("Error: --output must be specified with --input")
		return 1
	elif args.input_dir and not args.output_dir:
		print("Error: --output-dir must be specified with --input-dir")
		return 1

	try:
		config = build_config(args)
		logger = get_logger("docthresh", "DEBUG" if args.verbose else config.log_level)
		logger.debug(f"Effective configuration: {config.to_dict()}")
		binarizer = Binarizer(config)

		if args.compare:
			method_names = [m.strip() for m in args.compare.split(',') if m.strip()]
			return process_comparison(binarizer, Path(args.input), Path(args.output_dir), method_names, args.param)

		if args.input:
			input_path = Path(args.input)
			if not input_path.exists():
				print(f"Error: Input file not found: {input_path}")
				return 1

			result = process_single_image(binarizer, input_path, Path(args.output), args.verbose)
			return 0 if result.get('success') else 1

		input_dir = Path(args.input_dir)
		if not input_dir.exists():
			print(f"Error: Input directory not found: {input_dir}")
			return 1

		results = process_batch(binarizer, input_dir, Path(args.output_dir), args.verbose)
		failed = sum(1 for r in results if not r.get('success', False))
		return 1 if failed > 0 else 0

	except KeyboardInterrupt:
		print("\n\nInterrupted by user")
		return 130
	except (KeyError, ValueError, FileNotFoundError) as e:
		print(f"\nError: {e}")
		return 1


if __name__ == '__main__':
	sys.exit(main())
