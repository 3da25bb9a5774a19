# clubsite_backend/core/demo_club_config.py
"""
demo_club_config.py
-------------------
Defines the demo club used for local development and auto-seeding:
its teams, competitions (one of each format), rounds and fixtures.

Scores of None mean the fixture has not been played yet.
"""

DEMO_CLUB_ID = "demo-club"

demo_club_config = {
    "teams": [
        {"id": "fc-aoba", "name": "FCあおば", "logo_url": None},
        {"id": "sakura-united", "name": "さくらユナイテッド", "logo_url": None},
        {"id": "minato-sc", "name": "みなとSC", "logo_url": None},
        {"id": "kita-rovers", "name": "北ローバーズ", "logo_url": None},
    ],
    "competitions": [
        {
            "id": "city-league-2024",
            "name": "市民リーグ",
            "season": "2024",
            "format": "league",
            "teams": ["fc-aoba", "sakura-united", "minato-sc", "kita-rovers"],
            "rank_labels": [
                {"from": 1, "to": 1, "color": "green"},
                {"from": 4, "to": 4, "color": "red"},
            ],
            "rounds": [
                {
                    "id": "city-r1",
                    "name": "第1節",
                    "matches": [
                        ("cl-m1", "fc-aoba", "sakura-united", "2024-04-07", "10:00", 2, 1),
                        ("cl-m2", "minato-sc", "kita-rovers", "2024-04-07", "12:00", 0, 0),
                    ],
                },
                {
                    "id": "city-r2",
                    "name": "第2節",
                    "matches": [
                        ("cl-m3", "fc-aoba", "minato-sc", "2024-04-21", "10:00", 1, 3),
                        ("cl-m4", "sakura-united", "kita-rovers", "2024-04-21", "12:00", None, None),
                    ],
                },
            ],
        },
        {
            "id": "district-cup-2024",
            "name": "地区カップ",
            "season": "2024",
            "format": "league_cup",
            "teams": ["fc-aoba", "kita-rovers", "minato-sc"],
            "rounds": [
                {
                    "id": "district-gs1",
                    "name": "第1節",
                    "matches": [
                        ("dc-m1", "fc-aoba", "kita-rovers", "2024-05-12", "09:30", 4, 0),
                    ],
                },
                {
                    "id": "district-final",
                    "name": "決勝",
                    "matches": [
                        ("dc-m2", "fc-aoba", "minato-sc", "2024-06-02", "13:00", 1, 2),
                    ],
                },
            ],
        },
        {
            "id": "spring-cup-2024",
            "name": "春季トーナメント",
            "season": "2024",
            "format": "cup",
            "teams": [],
            "rounds": [
                {
                    "id": "spring-qf",
                    "name": "準々決勝",
                    "matches": [
                        ("sc-m1", "fc-aoba", "sakura-united", "2024-03-20", None, 2, 2),
                    ],
                },
            ],
        },
    ],
    "friendly_matches": [
        # (id, competition_id, home, away, date, time, score_home, score_away)
        ("fr-1", None, "fc-aoba", "kita-rovers", "2024-02-11", "14:00", 3, 3),
        ("pr-1", "practice", "fc-aoba", "minato-sc", "2024-02-18", None, None, None),
    ],
}
