#!/usr/bin/env python3
"""
run.py - Main entry point for PowerFour

Examples:
    python run.py play --power-ups
    python run.py play --opponent random --spawn-chance 0.2
    python run.py benchmark --iterations 500
"""

import os
import sys

# Add the project root to Python path so the package imports without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from powerfour.interfaces.cli import main

if __name__ == "__main__":
    main()
