#!/usr/bin/env python3
"""
Entry point for visual trial/channel rejection on epoched data.

Usage:
  python run_visual_reject.py --epochs s203-epo.fif --out_dir out/ \
      --config reject.yml --bad_trials 3 17 --bad_channels Fp1
"""
from visual_reject.cli import main

if __name__ == "__main__":
    main()
