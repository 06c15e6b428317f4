from pairchat.domain.services.reactions import toggle_reaction, unique_reactions

__all__ = ["toggle_reaction", "unique_reactions"]
