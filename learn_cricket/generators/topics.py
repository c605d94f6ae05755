"""
Cricket topic catalogue for Learn Cricket mode
"""
from learn_cricket.engine.adaptive import Difficulty

CRICKET_TOPICS = [
    "basic rules",
    "field positions",
    "batting techniques",
    "bowling types",
    "match formats",
    "scoring system",
    "equipment",
    "cricket terminology",
    "famous players",
    "cricket history",
]

TOPIC_DESCRIPTIONS = {
    "basic rules": "Fundamental rules of cricket including overs, innings, and dismissals",
    "field positions": "Fielding positions like slip, gully, mid-wicket, and point",
    "batting techniques": "Batting shots, stances, and strategies",
    "bowling types": "Different bowling styles including pace, spin, and swing",
    "match formats": "Test, ODI, T20, and other cricket formats",
    "scoring system": "How runs are scored, extras, and scorekeeping",
    "equipment": "Cricket gear including bat, ball, pads, and protective equipment",
    "cricket terminology": "Common cricket terms like googly, yorker, and maiden over",
    "famous players": "Legendary cricketers and their achievements",
    "cricket history": "Evolution of cricket and historic moments",
}

# Base difficulty of each topic
TOPIC_DIFFICULTY = {
    "basic rules": Difficulty.EASY,
    "field positions": Difficulty.EASY,
    "batting techniques": Difficulty.MEDIUM,
    "bowling types": Difficulty.MEDIUM,
    "match formats": Difficulty.EASY,
    "scoring system": Difficulty.EASY,
    "equipment": Difficulty.EASY,
    "cricket terminology": Difficulty.MEDIUM,
    "famous players": Difficulty.EASY,
    "cricket history": Difficulty.MEDIUM,
}
