import os

from engine import DiscardAdvisor
from match_engine import PracticeMatch
from models import GameStatus
from utils import id_to_str, print_hand


def clear_screen():
    """清空控制台屏幕，保持界面整洁"""
    os.system('cls' if os.name == 'nt' else 'clear')


def show_table(match: PracticeMatch):
    print("-" * 50)
    print(f"牌山剩余: {match.wall_remaining} 张    当前向听数: {match.current_shanten()}")
    print("牌河: " + " ".join(id_to_str(t.kind_id) for t in match.discard_pile))
    print_hand(match.hand)
    print("序号: " + " ".join(str(i + 1) for i in range(len(match.hand))))


def show_hint(advisor: DiscardAdvisor, match: PracticeMatch):
    best = advisor.compute_best_discards(match.hand, match.discard_pile)
    seen = set()
    for e in advisor.evaluate_discards(match.hand, match.discard_pile):
        if e['discard_id'] not in best or e['discard_tile'] in seen:
            continue
        seen.add(e['discard_tile'])
        detail_strs = [f"{id_to_str(d['tile'])}(剩{d['left_count']}张)" for d in e['details']]
        print(f"💡 推荐打出 【 {id_to_str(e['discard_tile'])} 】 "
              f"打后 {e['shanten_after_discard']} 向听，评分 {e['score']}")
        print(f"    有效牌: {', '.join(detail_strs)}")


def interactive_loop():
    match = PracticeMatch()
    advisor = DiscardAdvisor(match.oracle)
    match.reset()

    clear_screen()
    print("=" * 50)
    print("牌效练习终端 v1.0")
    print("=" * 50)
    print("操作说明：")
    print(" - 输入序号 (1-14) 打出对应的牌并摸一张")
    print(" - h: 查看推荐打法    u: 撤销    r: 重新开局    q: 退出")

    while True:
        show_table(match)
        if match.status == GameStatus.COMPLETE:
            print("🎉 恭喜！自摸和牌！输入 r 再来一局，q 退出。")
        elif match.status == GameStatus.EXHAUSTED:
            print("⚠️ 牌山已摸完，未能和牌。输入 u 撤销，r 再来一局。")

        command = input("\n👉 请输入操作: ").strip().lower()
        if command == 'q':
            print("感谢使用，祝你把把役满！")
            break
        if command == 'r':
            match.reset()
        elif command == 'u':
            if not match.undo():
                print("⚠️ 没有可以撤销的操作。")
        elif command == 'h':
            show_hint(advisor, match)
        elif command.isdigit() and 1 <= int(command) <= len(match.hand):
            tile = match.hand[int(command) - 1]
            if not match.discard_and_draw(tile.physical_id):
                print("⚠️ 当前无法打牌。")
        elif command:
            print("⚠️ 无法识别的操作。")


if __name__ == "__main__":
    interactive_loop()
