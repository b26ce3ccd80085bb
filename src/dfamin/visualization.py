import matplotlib.pyplot as plt
import networkx as nx

from dfamin.minimized import MinimizedDfa


class MinimizedDfaVisualizer:
    def __init__(self, dfa: MinimizedDfa):
        self.dfa = dfa

    def node_label(self, state_id: int, use_members: bool = True) -> str:
        s = self.dfa.states[state_id]
        return f"{s.name}{s.label}" if use_members else s.name

    def to_networkx(self, use_members: bool = True) -> nx.DiGraph:
        G = nx.DiGraph()
        for s in self.dfa.states:
            G.add_node(
                s.id,
                label=self.node_label(s.id, use_members),
                accepting=s.accepting,
                start=s.id == self.dfa.start,
            )

        for s in self.dfa.states:
            for symbol, target in s.transitions.items():
                if target is None:
                    continue
                if G.has_edge(s.id, target):
                    labels = G.edges[s.id, target]["label"].split(",")
                    if str(symbol) not in labels:
                        G.edges[s.id, target]["label"] = ",".join(labels + [str(symbol)])
                else:
                    G.add_edge(s.id, target, label=str(symbol))
        return G

    def node_color(self, G: nx.DiGraph, node: int) -> str:
        attrs = G.nodes[node]
        if attrs["start"]:
            return "lightgreen" if attrs["accepting"] else "lightblue"
        if attrs["accepting"]:
            return "lightcoral"
        return "lightgray"

    def plot(self, ax, title="Minimized DFA", use_members=True):
        G = self.to_networkx(use_members)

        if len(G.nodes) == 0:
            ax.text(0.5, 0.5, "Empty Automaton", ha="center", va="center", transform=ax.transAxes)
            ax.set_title(title)
            return

        k = 2.5 if len(G.nodes) <= 6 else 1.5
        pos = nx.spring_layout(G, k=k, iterations=100, seed=42)

        node_size = min(2000, max(800, 15000 // max(len(G.nodes), 1)))
        nx.draw_networkx_nodes(
            G,
            pos,
            node_color=[self.node_color(G, n) for n in G.nodes()],
            node_size=node_size,
            ax=ax,
            alpha=0.9,
        )

        for node, (x, y) in pos.items():
            ax.text(
                x,
                y,
                G.nodes[node]["label"],
                ha="center",
                va="center",
                fontsize=8,
                fontweight="bold",
                bbox=dict(boxstyle="round,pad=0.3", facecolor="white", edgecolor="black", alpha=0.9),
            )

        nx.draw_networkx_edges(
            G,
            pos,
            edge_color="gray",
            arrows=True,
            arrowsize=15,
            arrowstyle="->",
            width=1.2,
            ax=ax,
            alpha=0.7,
        )

        self._draw_edge_labels(ax, pos, G)
        ax.set_title(title, fontsize=12, fontweight="bold")
        ax.axis("off")

    def _draw_edge_labels(self, ax, pos, G):
        for from_node, to_node, attrs in G.edges(data=True):
            label = attrs["label"]
            x1, y1 = pos[from_node]
            x2, y2 = pos[to_node]

            if from_node == to_node:
                label_x, label_y = x1, y1 + 0.15
                facecolor, edgecolor = "yellow", "orange"
            else:
                mid_x, mid_y = (x1 + x2) / 2, (y1 + y2) / 2
                dx, dy = x2 - x1, y2 - y1
                length = (dx**2 + dy**2) ** 0.5
                if length > 0:
                    # offset perpendicular to the edge
                    label_x = mid_x - dy / length * 0.08
                    label_y = mid_y + dx / length * 0.08
                else:
                    label_x, label_y = mid_x, mid_y
                if "," in label:
                    facecolor, edgecolor = "lightcyan", "blue"
                else:
                    facecolor, edgecolor = "lightyellow", "orange"

            ax.text(
                label_x,
                label_y,
                label,
                ha="center",
                va="center",
                fontsize=7,
                fontweight="bold",
                bbox=dict(boxstyle="round,pad=0.2", facecolor=facecolor, alpha=0.9, edgecolor=edgecolor),
            )


def save_plot(dfa: MinimizedDfa, path: str, title: str = None) -> None:
    fig, ax = plt.subplots(figsize=(8, 6))
    try:
        MinimizedDfaVisualizer(dfa).plot(ax, title=title or dfa.name)
        fig.savefig(path, bbox_inches="tight")
    finally:
        plt.close(fig)
