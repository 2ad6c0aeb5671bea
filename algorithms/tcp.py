"""
tcp.py — TCP Three-Way Handshake
=================================
Generator walking a client and a server through SYN → SYN-ACK → ACK.

Yields a Step at:
  1. Initial state   (client CLOSED, server LISTEN)          phase 0
  2. SYN sent        (client SYN_SENT)                       phase 1
  3. SYN-ACK sent    (server SYN_RECEIVED)                   phase 2
  4. ACK sent        (both ESTABLISHED)                      phase 3
  5. Final step      (connection ready for data)             phase 4

Sequence numbers default to the values the lab sheet uses (1000 / 2000).
Packet travel animation is a rendering concern; each packet is one step.
"""

from typing import Any, Dict, Generator, List

from algorithms.step import Step, StepBuilder, StepKind


PSEUDOCODE: List[str] = [
    "server: LISTEN",                                     # 0
    "client → server: SYN(seq = x)",                      # 1
    "server → client: SYN-ACK(seq = y, ack = x + 1)",     # 2
    "client → server: ACK(ack = y + 1)",                  # 3
    "both sides: ESTABLISHED",                            # 4
]

PHASE_DESCRIPTIONS = {
    0: "Ready to start. Client is closed, server is listening.",
    1: "Step 1: Client sends SYN packet to initiate connection",
    2: "Step 2: Server responds with SYN-ACK to acknowledge",
    3: "Step 3: Client sends ACK to complete handshake",
    4: "Connection established! Data transfer can begin.",
}


def tcp_handshake(client_isn: int = 1000, server_isn: int = 2000) -> Generator[Step, None, None]:
    sb = StepBuilder(packets_sent=0)
    packets: List[Dict[str, Any]] = []

    def state(phase: int, client: str, server: str, explanation: str = "") -> Dict[str, Any]:
        return {
            "phase":        phase,
            "description":  PHASE_DESCRIPTIONS[phase],
            "client_state": client,
            "server_state": server,
            "packets":      packets,
            "explanation":  explanation,
        }

    def send(kind: str, sender: str, seq, ack) -> None:
        packets.append({"type": kind, "from": sender, "seq": seq, "ack": ack})
        sb.bump("packets_sent")
        sb.highlight(kind)

    sb.pseudocode_line = 0
    yield sb.emit(StepKind.START, "🚀 Starting TCP Three-Way Handshake...", **state(0, "CLOSED", "LISTEN"))

    send("SYN", "client", client_isn, None)
    sb.pseudocode_line = 1
    yield sb.emit(StepKind.PACKET, f"📤 Client → Server: SYN (Sequence Number: {client_isn})",
                  **state(1, "SYN_SENT", "LISTEN", "Client: 'I want to establish a connection'"))

    send("SYN-ACK", "server", server_isn, client_isn + 1)
    sb.pseudocode_line = 2
    yield sb.emit(StepKind.PACKET, f"📥 Server → Client: SYN-ACK (Seq: {server_isn}, Ack: {client_isn + 1})",
                  **state(2, "SYN_SENT", "SYN_RECEIVED", "Server: 'I acknowledge your SYN and here's my SYN'"))

    send("ACK", "client", client_isn + 1, server_isn + 1)
    sb.pseudocode_line = 3
    yield sb.emit(StepKind.PACKET, f"📤 Client → Server: ACK (Ack: {server_isn + 1})",
                  **state(3, "ESTABLISHED", "ESTABLISHED", "Client: 'I acknowledge your SYN-ACK'"))

    sb.highlight()
    sb.pseudocode_line = 4
    yield sb.emit(StepKind.DONE, "✅ Connection Established! Ready to transfer data.", is_final=True,
                  **state(4, "ESTABLISHED", "ESTABLISHED"))
