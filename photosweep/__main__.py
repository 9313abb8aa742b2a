"""
Allow running the package with: python -m photosweep

Examples:
    python -m photosweep ~/Pictures                 # Scan a photo folder
    python -m photosweep ~/Pictures --only similar  # Report only matches
    python -m photosweep config                     # Show current settings
    python -m photosweep config --init              # Create example config file
"""

import sys


def _config_command(argv: list[str]) -> int:
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in argv or '-i' in argv:
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize PhotoSweep settings.")
            return 0
        print("Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m photosweep config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  batch_size: {config.batch_size}")
    print(f"  max_parallel_operations: {config.max_parallel_operations}")
    print(f"  similarity_threshold: {config.similarity_threshold}")
    print(f"  monochrome_threshold: {config.monochrome_threshold}")
    print(f"  max_media_assets: {config.max_media_assets:,}")
    return 0


def main() -> int:
    argv = sys.argv[1:]
    if argv and argv[0] == 'config':
        return _config_command(argv[1:])

    from .cli import main as cli_main
    return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
