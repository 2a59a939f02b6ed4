# main.py
from experiments.exp1 import exp1_rule_of_thumb
from experiments.exp2 import exp2_topology_evolution
from experiments.exp3 import exp3_fixation_table

if __name__ == "__main__":
    print("Choose an experiment: 1=b/c rule of thumb (DB vs BD), 2=cooperation over time by topology, 3=fixation table")
    choice = input("Experiment number: ")
    if choice == "1":
        exp1_rule_of_thumb.main()
    elif choice == "2":
        exp2_topology_evolution.main()
    elif choice == "3":
        exp3_fixation_table.main()
