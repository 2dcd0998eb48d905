"""
CPU Scheduling Gantt Player
===========================

Run this module to open the player window:

    python main.py

The simulation service is expected at http://127.0.0.1:8000 unless
GANTT_PLAYER_BACKEND_URL says otherwise.
"""

from gantt_player.app import main


if __name__ == "__main__":
    main()
