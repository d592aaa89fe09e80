# Eduprompt: guided dialog service for writing classroom AI instructions.

__version__ = "0.1.0"
