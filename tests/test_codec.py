import logging

from dnslib import QTYPE, DNSRecord

from mdns_responder.codec import pack_response, parse_query, to_rr
from mdns_responder.records import Record, Response, SrvData, service_records


def test_parse_query_strips_root_dot_and_keeps_rinfo():
    packet = DNSRecord.question("_http._tcp.local", "PTR").pack()
    query = parse_query(packet, {"address": "10.0.0.5", "port": 5353})
    assert [(q.name, q.type) for q in query.questions] == [("_http._tcp.local", "PTR")]
    assert query.rinfo == {"address": "10.0.0.5", "port": 5353}


def test_parse_query_any():
    query = parse_query(DNSRecord.question("host.local", "ANY").pack())
    assert query.questions[0].type == "ANY"


def test_parse_query_ignores_responses():
    reply = DNSRecord.question("host.local", "A").reply()
    assert parse_query(reply.pack()) is None


def test_parse_query_ignores_garbage():
    assert parse_query(b"\x00\x01\x02") is None


def test_pack_response_is_authoritative_answer():
    records = service_records("Web", "http", 8080, "host.local", ["192.168.1.10", "fe80::1"], {"path": "/"})
    ptr, srv, txt, a, aaaa = records
    packet = DNSRecord.parse(pack_response(Response(answers=(ptr,), additionals=(srv, txt, a, aaaa))))

    assert packet.header.qr == 1
    assert packet.header.aa == 1
    assert packet.header.id == 0
    assert [QTYPE.get(rr.rtype) for rr in packet.rr] == ["PTR"]
    assert str(packet.rr[0].rdata.label) == "Web._http._tcp.local."
    assert [QTYPE.get(rr.rtype) for rr in packet.ar] == ["SRV", "TXT", "A", "AAAA"]
    assert packet.ar[0].rdata.port == 8080
    assert str(packet.ar[0].rdata.target) == "host.local."
    assert packet.ar[1].rdata.data == [b"path=/"]
    assert str(packet.ar[2].rdata) == "192.168.1.10"
    assert packet.ar[0].ttl == 120


def test_empty_txt_encodes_single_empty_string():
    rr = to_rr(Record("Web._http._tcp.local", "TXT", {}))
    assert rr.rdata.data == [b""]


def test_unsupported_or_malformed_records_are_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        assert to_rr(Record("host.local", "HINFO", "x")) is None
        assert to_rr(Record("host.local", "A", "not-an-address")) is None
        assert to_rr(Record("x.local", "SRV", {"target": "host.local"})) is None
    assert "invalid record skipped" in caplog.text

    packet = DNSRecord.parse(pack_response(Response(
        answers=(Record("host.local", "A", "10.0.0.1"), Record("host.local", "HINFO", "x")),
    )))
    assert len(packet.rr) == 1
