"""
Video Dataset Preparation Tool (PySide6 + OpenCV)

Prerequisites:
- Python 3.9+ recommended.
- Install the package: `pip install -e .`

Run the application:
- `python main.py [video]`
"""
from vidprep.__main__ import main

if __name__ == "__main__":
    main()
