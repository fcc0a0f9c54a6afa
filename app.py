import os
import random
import traceback
from typing import Optional

from flask import Flask, jsonify, request

from engine import DiscardAdvisor, RuleEngine
from match_engine import PracticeMatch
from utils import id_to_str

app = Flask(__name__)
engine = RuleEngine()
advisor = DiscardAdvisor(engine)

# 全局变量存储当前练习对局
active_practice: Optional[PracticeMatch] = None

# 强制使用文本变体 \uFE0E 防止浏览器将“中”等字符渲染成立体 Emoji
UNICODE_TILES = [
    "🀇\uFE0E", "🀈\uFE0E", "🀉\uFE0E", "🀊\uFE0E", "🀋\uFE0E", "🀌\uFE0E", "🀍\uFE0E", "🀎\uFE0E", "🀏\uFE0E",
    "🀙\uFE0E", "🀚\uFE0E", "🀛\uFE0E", "🀜\uFE0E", "🀝\uFE0E", "🀞\uFE0E", "🀟\uFE0E", "🀠\uFE0E", "🀡\uFE0E",
    "🀐\uFE0E", "🀑\uFE0E", "🀒\uFE0E", "🀓\uFE0E", "🀔\uFE0E", "🀕\uFE0E", "🀖\uFE0E", "🀗\uFE0E", "🀘\uFE0E",
    "🀀\uFE0E", "🀁\uFE0E", "🀂\uFE0E", "🀃\uFE0E", "🀆\uFE0E", "🀅\uFE0E", "🀄\uFE0E"
]


def make_rng() -> random.Random:
    """PRACTICE_SEED 环境变量存在时用固定种子，方便复现牌山"""
    seed = os.environ.get("PRACTICE_SEED")
    return random.Random(int(seed)) if seed else random.Random()


def tile_to_json(tile):
    return {"id": tile.physical_id, "kind": tile.kind_id,
            "name": id_to_str(tile.kind_id), "char": UNICODE_TILES[tile.kind_id]}


def details_to_json(details):
    return [{"kind": d['tile'], "name": id_to_str(d['tile']), "char": UNICODE_TILES[d['tile']],
             "left": d['left_count'], "weight": d['weight']} for d in details]


def get_practice_state():
    if not active_practice: return {}
    return {
        "status": active_practice.status,
        "hand": [tile_to_json(t) for t in active_practice.hand],
        "discards": [tile_to_json(t) for t in active_practice.discard_pile],
        "wall_remaining": active_practice.wall_remaining,
        "can_undo": active_practice.can_undo,
        "shanten": active_practice.current_shanten(),
    }


def read_tile_id():
    """从请求体读取物理牌 ID，格式不对时返回 None"""
    data = request.get_json(silent=True) or {}
    tile = data.get('tile')
    if isinstance(tile, bool) or not isinstance(tile, int) or not (0 <= tile < 136):
        return None
    return tile


@app.route('/api/practice/start', methods=['POST'])
def start_practice():
    global active_practice
    try:
        data = request.get_json(silent=True) or {}
        active_practice = PracticeMatch(oracle=engine, rng=make_rng())
        active_practice.reset(shuffle=data.get('shuffle', True))
        app.logger.info("practice started, wall=%d", active_practice.wall_remaining)
        return jsonify(get_practice_state())
    except Exception as e:
        traceback.print_exc()
        return jsonify({"error": str(e)}), 500


@app.route('/api/practice/state', methods=['GET'])
def practice_state():
    if not active_practice: return jsonify({"error": "No practice"}), 400
    return jsonify(get_practice_state())


@app.route('/api/practice/discard', methods=['POST'])
def practice_discard():
    if not active_practice: return jsonify({"error": "No practice"}), 400
    tile = read_tile_id()
    if tile is None: return jsonify({"error": "Invalid tile"}), 400
    try:
        changed = active_practice.discard_and_draw(tile)
        state = get_practice_state()
        state["changed"] = changed
        if active_practice.winning_hand:
            app.logger.info("practice won after %d discards", len(active_practice.discard_pile))
        return jsonify(state)
    except Exception as e:
        traceback.print_exc()
        return jsonify({"error": str(e)}), 500


@app.route('/api/practice/undo', methods=['POST'])
def practice_undo():
    if not active_practice: return jsonify({"error": "No practice"}), 400
    changed = active_practice.undo()
    state = get_practice_state()
    state["changed"] = changed
    return jsonify(state)


@app.route('/api/practice/hint', methods=['GET'])
def practice_hint():
    if not active_practice: return jsonify({"error": "No practice"}), 400
    try:
        hand, discards = active_practice.hand, active_practice.discard_pile
        evaluations = advisor.evaluate_discards(hand, discards)
        best = {e['discard_id'] for e in advisor._optimal(evaluations)}

        # 每个种类只展示一次
        seen, recommendations = set(), []
        for e in evaluations:
            if e['discard_tile'] in seen: continue
            seen.add(e['discard_tile'])
            recommendations.append({
                "discard_id": e['discard_id'], "discard_name": id_to_str(e['discard_tile']),
                "discard_char": UNICODE_TILES[e['discard_tile']],
                "shanten": e['shanten_after_discard'], "score": e['score'],
                "is_best": e['discard_id'] in best, "details": details_to_json(e['details'])
            })
        recommendations.sort(key=lambda r: (r['shanten'], -r['score']))
        return jsonify({"best": sorted(best), "recommendations": recommendations})
    except Exception as e:
        traceback.print_exc()
        return jsonify({"error": str(e)}), 500


@app.route('/api/practice/preview', methods=['POST'])
def practice_preview():
    if not active_practice: return jsonify({"error": "No practice"}), 400
    tile = read_tile_id()
    if tile is None: return jsonify({"error": "Invalid tile"}), 400
    preview = advisor.preview_discard(active_practice.hand, tile, active_practice.discard_pile)
    if preview is None: return jsonify({"error": "Tile not in hand"}), 400
    preview["details"] = details_to_json(preview["details"])
    return jsonify(preview)


if __name__ == '__main__':
    # 生产环境通常由 gunicorn 启动，但保留此逻辑方便本地调试
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
