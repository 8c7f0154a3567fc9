from .graph_store import GraphStore, graph_to_dict, graph_from_dict

__all__ = ['GraphStore', 'graph_to_dict', 'graph_from_dict']
