from __future__ import annotations

from langgraph.graph import END, START, StateGraph

from .models import ReplyState
from .nodes import cleanup_node, complete_node, deliver_node, prepare_node


def build_reply_graph(runtime):
    graph = StateGraph(ReplyState)

    async def _prepare(state: ReplyState):
        return await prepare_node(state, runtime)

    async def _complete(state: ReplyState):
        return await complete_node(state, runtime)

    async def _cleanup(state: ReplyState):
        return await cleanup_node(state, runtime)

    async def _deliver(state: ReplyState):
        return await deliver_node(state, runtime)

    graph.add_node("prepare", _prepare)
    graph.add_node("complete", _complete)
    graph.add_node("cleanup", _cleanup)
    graph.add_node("deliver", _deliver)

    graph.add_edge(START, "prepare")
    graph.add_edge("prepare", "complete")
    graph.add_edge("complete", "cleanup")
    graph.add_edge("cleanup", "deliver")
    graph.add_edge("deliver", END)

    return graph.compile()
