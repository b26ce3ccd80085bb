import json
import logging
import os
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple

from dfamin.automaton import GraphLimits, State, StateGraph
from dfamin.errors import ConstructionError, UnknownStartStateError
from dfamin.minimized import MinimizedDfa

logger = logging.getLogger(__name__)

FORMATS = ("json", "xml")


def detect_format_from_ext(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".json", ".jsn"):
        return "json"
    if ext in (".xml",):
        return "xml"
    return "json"


def _build_graph(
    states: List[str],
    alphabet: List[str],
    start_state: str,
    accept_states: List[str],
    transitions: Dict[str, Dict[str, Optional[str]]],
    limits: Optional[GraphLimits],
) -> Tuple[StateGraph, State]:
    if len(set(states)) != len(states):
        raise ConstructionError("state names must be unique in an automaton file")

    declared = set(states)
    for s in accept_states:
        if s not in declared:
            raise ConstructionError(f"accepting state {s!r} is not declared")

    if not alphabet:
        alphabet = sorted({sym for sym_map in transitions.values() for sym in sym_map})

    graph = StateGraph(alphabet, limits)
    accepting = set(accept_states)
    by_name = {name: graph.create_state(name, name in accepting) for name in states}

    for src, sym_map in transitions.items():
        if src not in by_name:
            raise ConstructionError(f"transition from undeclared state {src!r}")
        for sym, dest in sym_map.items():
            if dest is not None and dest not in by_name:
                raise ConstructionError(f"transition {src!r} --{sym}--> undeclared state {dest!r}")
            graph.set_transition(by_name[src], sym, None if dest is None else by_name[dest])

    if start_state not in by_name:
        raise UnknownStartStateError(f"start state {start_state!r} is not declared")

    logger.debug("Loaded automaton: %s", graph.get_stats())
    return graph, by_name[start_state]


def _single_target(src: str, sym: str, dests) -> Optional[str]:
    if dests is None:
        return None
    if not isinstance(dests, (list, tuple)):
        return str(dests)
    dests = list(dict.fromkeys(str(d) for d in dests))
    if not dests:
        return None
    if len(dests) > 1:
        raise ConstructionError(
            f"state {src!r} has {len(dests)} targets on {sym!r}; a DFA needs at most one"
        )
    return dests[0]


def _expect(value, kind, path: str, what: str):
    if not isinstance(value, kind):
        raise ConstructionError(
            f"{path}: {what} must be a JSON {'array' if kind is list else 'object'}, got {type(value).__name__}"
        )
    return value


def parse_json_automaton(
    path: str, limits: Optional[GraphLimits] = None
) -> Tuple[StateGraph, State, str]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConstructionError(f"{path}: invalid JSON: {e}") from e

    _expect(data, dict, path, "top level")

    try:
        states = [str(s) for s in _expect(data["states"], list, path, "states")]
        start_state = str(data["start_state"])
    except KeyError as e:
        raise ConstructionError(f"{path}: missing key {e}") from e

    alphabet = [str(sym) for sym in _expect(data.get("alphabet", []), list, path, "alphabet")]
    accept_states = [str(s) for s in _expect(data.get("accept_states", []), list, path, "accept_states")]

    transitions: Dict[str, Dict[str, Optional[str]]] = {}
    for s, symbol_map in _expect(data.get("transitions", {}), dict, path, "transitions").items():
        _expect(symbol_map, dict, path, f"transitions of {s!r}")
        transitions[s] = {
            str(sym): _single_target(s, sym, dests) for sym, dests in symbol_map.items()
        }

    name = data.get("name", os.path.splitext(os.path.basename(path))[0])
    graph, start = _build_graph(states, alphabet, start_state, accept_states, transitions, limits)
    return graph, start, name


def parse_xml_automaton(
    path: str, limits: Optional[GraphLimits] = None
) -> Tuple[StateGraph, State, str]:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ConstructionError(f"{path}: invalid XML: {e}") from e

    def findall(elem, *names):
        for n in names:
            found = elem.findall(n)
            if found:
                return found
        return []

    def findone(elem, *names):
        for n in names:
            f = elem.find(n)
            if f is not None:
                return f
        return None

    name = root.attrib.get("name") or os.path.splitext(os.path.basename(path))[0]

    state_nodes = findall(root, "states/state", "States/State", "stateSet/state")
    states = [n.text.strip() for n in state_nodes if n.text]

    alpha_nodes = findall(root, "alphabet/symbol", "Alphabet/Symbol", "alphabet/char", "Alphabet/Char")
    alphabet = [n.text.strip() for n in alpha_nodes if n.text]

    start_node = findone(root, "start", "Start")
    if start_node is None or not start_node.text:
        raise ConstructionError(f"{path}: missing <start> node with start state text")
    start_state = start_node.text.strip()

    accept_nodes = findall(root, "accept/state", "Accept/State", "finals/state")
    accept_states = [n.text.strip() for n in accept_nodes if n.text]

    collected: Dict[str, Dict[str, List[str]]] = {}
    t_nodes = findall(root, "transitions/t", "Transitions/T", "transitions/transition", "Transitions/Transition")
    for t in t_nodes:
        frm = t.attrib.get("from") or t.findtext("from") or t.findtext("From")
        sym = t.attrib.get("symbol") or t.findtext("symbol") or t.findtext("Symbol")
        to = t.attrib.get("to") or t.findtext("to") or t.findtext("To")
        if frm is None or sym is None:
            raise ConstructionError(f"{path}: transition without 'from' or 'symbol'")
        dests = collected.setdefault(frm.strip(), {}).setdefault(sym.strip(), [])
        if to is not None and to.strip():
            dests.append(to.strip())

    transitions = {
        s: {sym: _single_target(s, sym, dests) for sym, dests in sym_map.items()}
        for s, sym_map in collected.items()
    }

    graph, start = _build_graph(states, alphabet, start_state, accept_states, transitions, limits)
    return graph, start, name


def load_automaton(
    path: str, fmt: Optional[str] = None, limits: Optional[GraphLimits] = None
) -> Tuple[StateGraph, State, str]:
    fmt = fmt or detect_format_from_ext(path)
    if fmt == "json":
        return parse_json_automaton(path, limits)
    elif fmt == "xml":
        return parse_xml_automaton(path, limits)
    else:
        raise ConstructionError(f"Unsupported format: {fmt}")


def minimized_to_json_dict(dfa: MinimizedDfa) -> dict:
    return {
        "name": dfa.name,
        "states": [s.name for s in dfa.states],
        "alphabet": [str(sym) for sym in dfa.alphabet],
        "start_state": dfa.start_state.name,
        "accept_states": [s.name for s in dfa.states if s.accepting],
        "transitions": {
            s.name: {
                str(sym): None if target is None else f"S{target}"
                for sym, target in s.transitions.items()
            }
            for s in dfa.states
        },
        "state_composition": {s.name: list(s.members) for s in dfa.states},
    }


def minimized_to_xml_element(dfa: MinimizedDfa) -> ET.Element:
    root = ET.Element("automaton", attrib={"name": dfa.name})
    states_el = ET.SubElement(root, "states")
    for s in dfa.states:
        state_el = ET.SubElement(states_el, "state")
        state_el.text = s.name
        state_el.set("composition", ",".join(s.members))
    alpha_el = ET.SubElement(root, "alphabet")
    for sym in dfa.alphabet:
        ET.SubElement(alpha_el, "symbol").text = str(sym)
    ET.SubElement(root, "start").text = dfa.start_state.name
    accept_el = ET.SubElement(root, "accept")
    for s in dfa.states:
        if s.accepting:
            ET.SubElement(accept_el, "state").text = s.name
    trans_el = ET.SubElement(root, "transitions")
    for s in dfa.states:
        for sym, target in s.transitions.items():
            if target is None:
                continue
            t = ET.SubElement(trans_el, "t")
            t.set("from", s.name)
            t.set("symbol", str(sym))
            t.set("to", f"S{target}")
    return root


def write_minimized(dfa: MinimizedDfa, path: str, fmt: Optional[str] = None) -> None:
    fmt = fmt or detect_format_from_ext(path)
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    if fmt == "json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(minimized_to_json_dict(dfa), f, ensure_ascii=False, indent=2)
    elif fmt == "xml":
        tree = ET.ElementTree(minimized_to_xml_element(dfa))
        ET.indent(tree)
        tree.write(path, encoding="utf-8", xml_declaration=True)
    else:
        raise ConstructionError(f"Unsupported format: {fmt}")
    logger.info("Wrote minimized DFA to %s (%s)", path, fmt)
