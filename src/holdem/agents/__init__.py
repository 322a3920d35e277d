from .allin_agent import AllInAgent
from .base_agent import BasePokerAgent
from .npc_agent import NpcAgent
from .profile import ARCHETYPES, PersonalityProfile, create_profile
